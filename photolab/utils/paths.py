# photolab/utils/paths.py
import os
from photolab.config import Settings

def ensure_dirs(settings: Settings):
    os.makedirs(settings.STATIC_DIR, exist_ok=True)
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
