"""
API routes, mounted under /api by app.main:
- auth: login
- events: event schedule CRUD and per-event results
- fighters: fighter lookup and search
- bet_types: bet type taxonomy
- user_bets: user predictions and outcomes
- event_results: results ingestion
"""
