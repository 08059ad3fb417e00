"""Clinic application for the Tele Heal backend.

This package contains the async backend-access services, the serializers
and views exposing them over HTTP, and the WebSocket relay for realtime
updates.
"""
