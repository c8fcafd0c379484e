"""Web service for the orbital layout."""
