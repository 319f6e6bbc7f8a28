"""
Integration Tests Package for Parkir

These tests wire the real components together (console view, presenter,
commands, service, event bus) and drive them with scripted input.
"""
