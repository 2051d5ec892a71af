from pathlib import Path

LOCAL_FOLDER = Path.home() / ".rosa-hcp"
LOCAL_LOG_FILE = LOCAL_FOLDER / "rosa-hcp.log"
