"""
Integration tests for graphinspect.

These tests write complete index files in every supported layout and read
them back through the public entry points and the command-line driver.
"""
