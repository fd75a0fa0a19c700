"""
Test Tools Package
Tests for the push notification dispatcher
"""
