"""notitlebar - hide window title bars of maximized windows on X11 desktops.

Watches window lifecycle events, remembers each window's original decoration
preference and toggles the Motif decoration hint so that maximized windows
lose their title bar. The daemon runs as an asyncio service driven by
`xprop -spy` event streams.
"""
