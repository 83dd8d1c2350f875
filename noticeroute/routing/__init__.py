"""noticeroute routing: resolves destinations and prints to windows.

The NoticeDispatcher walks the rule table for each server notice, and the
DestinationResolver turns every destination token of a matching rule into a
window: the active window, a network-prefixed window in multi-network mode,
a window by name, or the host's default window as a last resort.
"""
