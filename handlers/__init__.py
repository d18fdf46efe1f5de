"""
handlers/ - Presentation Layer
================================
Flask blueprints. Each handler parses the HTTP request, delegates to the
appropriate Service, and returns JSON. No business logic lives here.
"""
