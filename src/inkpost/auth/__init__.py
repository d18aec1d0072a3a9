"""Authentication and authorization.

Learn: Three pieces, leaves first:
1. jwt.TokenCodec → issues and verifies signed, expiring session tokens
2. dependencies.get_current_user → bearer header → CurrentIdentity
3. ownership.guard_post → only a post's owner may change it

Passwords are bcrypt-hashed (password.py) and only ever compared there.
"""
