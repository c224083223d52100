"""
Infrastructure adapters: browser process, DevTools transport, configuration.
"""
