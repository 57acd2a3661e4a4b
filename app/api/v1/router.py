from fastapi import APIRouter

# Auth
from app.api.v1.public.auth import router as auth_router

# Public — catalog
from app.api.v1.public.movies import router as movies_router

# Public — showtimes, seat map, live seat feed
from app.api.v1.public.showtimes import router as showtimes_router

# Public — bookings
from app.api.v1.public.bookings import router as bookings_router

# Public — user profile
from app.api.v1.public.me import router as me_router

# Admin
from app.api.v1.admin.movies import router as admin_movies_router
from app.api.v1.admin.halls import router as admin_halls_router
from app.api.v1.admin.showtimes import router as admin_showtimes_router
from app.api.v1.admin.bookings import router as admin_bookings_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)

# --- Public: catalog ---
api_router.include_router(movies_router)
api_router.include_router(showtimes_router)

# --- Public: bookings ---
api_router.include_router(bookings_router)

# --- Public: profile ---
api_router.include_router(me_router)

# --- Admin ---
api_router.include_router(admin_movies_router)
api_router.include_router(admin_halls_router)
api_router.include_router(admin_showtimes_router)
api_router.include_router(admin_bookings_router)
