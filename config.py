"""
PricePerGB Config Module
------------------------
Zentrale Konfiguration für das gesamte PricePerGB-System.

Beinhaltet:
- Pfad-Management
- Umgebungsvariablen
- Selektoren der Paket-Seite
- Einheiten-Vokabular (GB/MB)
- Darstellung des Fragments
- API-Settings
- Logging-Konfiguration
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

from engine.vocabulary import PipelineConfig, RenderSettings, Selectors, UnitVocabulary

# -----------------------------
# Load .env if available
# -----------------------------
load_dotenv()

# -----------------------------
# Base project paths
# -----------------------------
BASE_DIR = Path(__file__).resolve().parent
LOG_DIR = BASE_DIR / "logs"

# -----------------------------
# Scraper configuration
# -----------------------------
SCRAPER = {
    "TARGET_URL": os.getenv("PPGB_TARGET_URL", ""),
    "OUTPUT_HTML": os.getenv("PPGB_OUTPUT_HTML", ""),
    "HEADLESS": True,
    "WATCH_SECONDS": 30,
}

# -----------------------------
# Selectors (Paket-Box, Preis, Größe)
# -----------------------------
SELECTORS = {
    "CONTAINER": os.getenv("PPGB_CONTAINER_SELECTOR", ".card-templ-wrapper"),
    "PRICE": os.getenv("PPGB_PRICE_SELECTOR", ".card-price .fa-number"),
    "SIZE": os.getenv("PPGB_SIZE_SELECTOR", ".card-description h6"),
    "TEMPLATE": ".card-template",
    "BUY_CREDIT": ".card-buy-credit",
}

# -----------------------------
# Units (GB / MB Schreibweisen)
# -----------------------------
UNITS = {
    "LARGE_TOKENS": ("گیگابایت", "گیگا بایت", "گیگ", "gigabyte", "GB", "gig"),
    "SMALL_TOKENS": ("مگابایت", "مگا بایت", "مگ", "megabyte", "MB"),
    "SMALL_PER_LARGE": 1024.0,
    "HEURISTIC_THRESHOLD": 100.0,
}

# -----------------------------
# Rendering
# -----------------------------
RENDER = {
    "FRAGMENT_CLASS": "price-per-gb-extension",
    "STYLE_ID": "price-per-gb-style",
    "METRIC_ATTRIBUTE": "data-price-per-gb",
    "LABEL": "ارزش هر گیگابایت:",
    "CURRENCY": "تومان",
}

# -----------------------------
# Logging configuration
# -----------------------------
LOGGING = {
    "LOG_DIR": str(LOG_DIR),
    "LOG_FILE": str(LOG_DIR / "pricepergb.log"),
    "LEVEL": os.getenv("LOG_LEVEL", "INFO"),
    "FORMAT": "%(asctime)s %(levelname)s %(name)s - %(message)s",
}

# -----------------------------
# API configuration
# -----------------------------
API = {
    "HOST": "0.0.0.0",
    "PORT": 8000,
    "RELOAD": True,
    "TITLE": "PricePerGB API",
    "DESCRIPTION": "Preis pro Gigabyte für Datenpaket-Seiten",
}


# -----------------------------
# Config classes
# -----------------------------
class Config:
    DEBUG = False
    TESTING = False
    SCRAPER = SCRAPER
    SELECTORS = SELECTORS
    UNITS = UNITS
    RENDER = RENDER
    LOGGING = LOGGING
    API = API


class DevConfig(Config):
    DEBUG = True
    SCRAPER = {**SCRAPER, "HEADLESS": False}
    LOGGING = {**LOGGING, "LEVEL": "DEBUG"}


class ProdConfig(Config):
    DEBUG = False
    SCRAPER = {**SCRAPER, "HEADLESS": True}
    LOGGING = {**LOGGING, "LEVEL": "INFO"}


# active config
ACTIVE_CONFIG = ProdConfig() if os.getenv("ENV") == "prod" else DevConfig()


def build_pipeline_config(cfg: Config = None) -> PipelineConfig:
    """
    Übersetzt die Settings-Dicts in den unveränderlichen PipelineConfig-Wert,
    der an PackagePage / PackageProcessor übergeben wird.
    """
    cfg = cfg or ACTIVE_CONFIG
    sel = cfg.SELECTORS
    units = cfg.UNITS
    render = cfg.RENDER

    return PipelineConfig(
        selectors=Selectors(
            container=sel["CONTAINER"],
            price=sel["PRICE"],
            size=sel["SIZE"],
            template=sel["TEMPLATE"],
            buy_credit=sel["BUY_CREDIT"],
        ),
        vocabulary=UnitVocabulary(
            large_tokens=tuple(units["LARGE_TOKENS"]),
            small_tokens=tuple(units["SMALL_TOKENS"]),
            small_per_large=float(units["SMALL_PER_LARGE"]),
            heuristic_threshold=float(units["HEURISTIC_THRESHOLD"]),
        ),
        render=RenderSettings(
            fragment_class=render["FRAGMENT_CLASS"],
            style_id=render["STYLE_ID"],
            metric_attribute=render["METRIC_ATTRIBUTE"],
            label=render["LABEL"],
            currency=render["CURRENCY"],
        ),
    )


def configure_logging(cfg: Config = None) -> None:
    """Logging für Skripte & API: Konsole + Logdatei."""
    cfg = cfg or ACTIVE_CONFIG
    log_cfg = cfg.LOGGING

    Path(log_cfg["LOG_DIR"]).mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, str(log_cfg["LEVEL"]).upper(), logging.INFO),
        format=log_cfg["FORMAT"],
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_cfg["LOG_FILE"], encoding="utf-8"),
        ],
    )
