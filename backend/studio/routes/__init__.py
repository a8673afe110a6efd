"""
EdAiVi Studio Backend: API Routes Package
=========================================

What:  HTTP and WebSocket handlers, one router per area.

Route Inventory:
    - auth.py:      /api/auth      register, login, profile, password, dev login
    - ai.py:        /api/ai        model catalog, metered generation, credits
    - audio.py:     /api/audio     audio projects, tracks, export, collaborators
    - video.py:     /api/video     video projects, scenes, media, export
    - scene.py:     /api/scene     3D scenes, objects, lights, clone
    - avatar.py:    /api/avatar    avatars, animations, textures, clone
    - stream.py:    /api/stream    stream sessions, status, chat, viewers
    - realtime.py:  /ws            room relay
    - health.py:    /health, /api, /api/status

Routes stay thin: parse the request, call one service method, shape the
response. Rules live in the services.
"""
