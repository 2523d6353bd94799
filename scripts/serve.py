# in scripts/serve.py
import uvicorn
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env BEFORE the app (and its settings) is imported
load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent

if os.environ.get('TEST_MODE', '').lower() in ('1', 'true'):
    # The test database is in-memory, so it needs its tables created on startup.
    os.environ.setdefault('CREATE_SCHEMA_ON_STARTUP', 'True')
    print("--- Running with LOCAL TEST DATABASE ---")

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 8000))
    src_path = str(PROJECT_ROOT / "src")

    uvicorn.run(
        "shared_schedule_backend.main:app",
        host="127.0.0.1",
        port=port,
        reload=True,
        reload_dirs=[src_path]
    )
