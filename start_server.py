#!/usr/bin/env python3
"""
Simple server startup script for the steamkey control API
"""
import sys

print("Starting steamkey control API...")
print("=" * 60)
print()

try:
    from steamkey.app_factory import create_app

    app = create_app()
    host = app.config['HOST']
    port = app.config['PORT']

    print("App initialized successfully!")
    print()
    print("=" * 60)
    print("Server running at:")
    print(f"   http://{host}:{port}")
    print()
    print("Routes:")
    print(f"   Fetch key:    GET    http://{host}:{port}/api/v1/webapi-key")
    print(f"   Register key: POST   http://{host}:{port}/api/v1/webapi-key")
    print(f"   Revoke key:   DELETE http://{host}:{port}/api/v1/webapi-key")
    print(f"   Cached key:   GET    http://{host}:{port}/api/v1/webapi-key/cached")
    print("=" * 60)
    print()
    print("Press CTRL+C to stop the server")
    print()

    app.run(
        host=host,
        port=port,
        debug=app.config['DEBUG'],
        use_reloader=False  # Keep a single Community session
    )

except KeyboardInterrupt:
    print("\n\nServer stopped. Goodbye!")
    sys.exit(0)
except Exception as e:
    print(f"\nError starting server: {e}")
    print("\nTroubleshooting:")
    print("1. Check if dependencies are installed: pip install -e .")
    print("2. Make sure STEAM_LOGIN_SECURE and STEAM_SESSION_ID are exported")
    print("3. Check the error message above for details")
    sys.exit(1)
