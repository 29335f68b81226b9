"""
FastAPI routers grouped by domain (auth, cards, rewards).

Each module exposes an APIRouter; the auth app includes `auth` and `cards`,
the rewards app includes `rewards`. Services are looked up on `app.state`.
"""
