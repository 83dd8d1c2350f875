"""Core engine: rule loading, the rule table, and the Reformatter.

Nothing in core depends on a particular display host; windows are reached
through the ``HostPort`` protocol from ``noticeroute.routing.sinks``.
"""
