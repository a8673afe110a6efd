"""
EdAiVi Studio Backend: Services Layer
=====================================

What:  Business rules between the routes (HTTP) and the document store.
How:   Each service is a stateless class with a module-level singleton;
       every method takes the `Store` as its first argument.

Service Inventory:
    - credit_gate:     tier + credit admission and metering for AI calls
    - ai_service:      model catalog, simulated generation, credit purchases
    - auth_service:    accounts, sessions, password and verification tokens
    - project_access:  load-and-authorize helpers, collaborator management
    - audio_service, video_service, scene_service, avatar_service:
                       project aggregates and their child records
    - stream_service:  stream sessions and their state machine
    - realtime:        websocket room hub
"""
