"""
Test Actions Package
Tests for the reminder engines, registry and dedup tracker
"""
