"""Run FastAPI server."""
import uvicorn

from family_tree.api.main import create_app
from family_tree.config import configure_logging

if __name__ == "__main__":
    configure_logging()
    print("Starting FastAPI on http://localhost:8000")
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
