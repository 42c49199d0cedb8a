"""
Warden Server Package.

This package contains the web server implementation for Warden.
"""
