import os
import sys
import time

import jwt
from dotenv import load_dotenv

load_dotenv()

# Mints a short-lived token for calling the local API, e.g.
#   curl -H "Authorization: Bearer $(python scripts/make_token.py Admin)" ...

secret = os.getenv("WSSLOTS_JWT_SECRET")
if not secret:
    sys.exit("WSSLOTS_JWT_SECRET is not set")

user = sys.argv[1] if len(sys.argv) > 1 else "Admin"

now = int(time.time())
payload = {
    "iss": "MediaWiki",
    "aud": "wsslots",
    "iat": now,
    "exp": now + 300,
    "user": user,
    "roles": ["user"],
    "scope": ["read", "edit", "create"],
}

print(jwt.encode(payload, secret, algorithm=os.getenv("WSSLOTS_JWT_ALGO", "HS256")))
