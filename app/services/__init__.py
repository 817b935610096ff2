"""
Services module for business logic.

- record_parser / result_classifier: pure parsing of feed text
- fighter_registry: upsert-by-name fighter resolution
- event_service: events and their bouts
- results_ingestion_service: results feed reconciliation
- betting_service: bet types, user bets and settlement
- auth_client: sign-in and token verification against the auth service
"""
