# Routes package init
"""
Favorite Places — API Routes Package
=====================================

Route Inventory:
    - places.py:       GET    /places                (catalog)
    - user_places.py:  GET    /user-places           (favorites)
                       PUT    /user-places           (add favorite)
                       DELETE /user-places/{id}      (remove favorite)
    - health.py:       GET    /health                (service health check)

Routes stay thin: pull the input out of the request, call the service,
shape the response. Failures are raised as FavPlacesError subclasses and
rendered by the global handlers in main.py.
"""
