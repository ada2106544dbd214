"""Realtime infrastructure (Socket.IO, namespace gate, publishers).

Transport concerns live here; the post domain in ``post_relay.posts`` only
sees the :class:`~post_relay.realtime.connection.Connection` capability.
"""
