"""
Quillpress Starter App
======================

A ready-to-run Flask application with every Quillpress module enabled.

Run with:
    python app.py

Visit:
    http://localhost:5000/health       - Health check
    http://localhost:5000/api/posts    - Published posts
"""

from quillpress import Config, create_app

# Create Flask app - this registers all modules automatically
app = create_app()


# =============================================================================
# Run the app
# =============================================================================

if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("Quillpress")
    print("=" * 60)
    print(f"Health:          http://localhost:{Config.port}/health")
    print(f"Posts API:       http://localhost:{Config.port}/api/posts")
    print(f"Register admin:  POST http://localhost:{Config.port}/api/auth/register")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)
