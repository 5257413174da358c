# Destination table: configuration

"""
Expected table structure:

configuration:
- key: text (primary key)
- value: text (not null)
"""

CONFIGURATION_TABLE = "configuration"

REQUIRES_MFA_KEY = "requires_mfa"
