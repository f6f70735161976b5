"""
Coinbase API Integration

Provides the building blocks used by the Coinbase client:
- Authentication (HMAC signing and CDP JWT generation)
- Request handlers per credential variant
- v2 (next_uri) and v3 (cursor) pagination
- Account balance normalization
- API key permission checks
"""
