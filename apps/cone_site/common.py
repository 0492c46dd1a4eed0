from py4web import Session, Translator, DAL
from py4web.utils.dbstore import DBStore
from .settings import APP_FOLDER, T_FOLDER, SESSION_SECRET, LOG_LEVEL, AREA_THRESHOLD, KERNEL_SIZE
from .logging_setup import setup_logging
from .modules.cone_detector.schemas import DetectorConfig
import os

setup_logging(LOG_LEVEL)

# Database
DB_FOLDER = os.path.join(APP_FOLDER, 'databases')
if not os.path.exists(DB_FOLDER):
    os.makedirs(DB_FOLDER)

db = DAL('sqlite://storage.db', folder=DB_FOLDER)

# Session
session = Session(secret=SESSION_SECRET, storage=DBStore(db))

# Translations
T = Translator(T_FOLDER)

def load_detector_config(area_threshold=None, kernel_size=None, blackout=False):
    """Build a DetectorConfig from the configured defaults and optional overrides."""
    area_threshold = AREA_THRESHOLD if area_threshold is None else area_threshold
    kernel_size = KERNEL_SIZE if kernel_size is None else kernel_size
    if blackout:
        return DetectorConfig.for_track(area_threshold=area_threshold, kernel_size=kernel_size)
    return DetectorConfig(area_threshold=area_threshold, kernel_size=kernel_size)
