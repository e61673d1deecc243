"""User-account service: registration, login and admin user management."""
