"""Authentication and authorization.

Three pieces, leaves first:
1. password — argon2id hashing and verification
2. tokens — opaque session tokens with lazy expiry
3. dependencies — bearer token → current user, plus the ownership check
"""
