"""
Test Services Package
Tests for persistence and the reminder service
"""
