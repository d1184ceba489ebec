import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Elasticsearch
    ES_HOST = os.getenv("ES_HOST", "http://localhost:9200")
    # Never commit a real key; set ES_API_KEY in the environment or .env
    ES_API_KEY = os.getenv("ES_API_KEY", "")
    ES_REQUEST_TIMEOUT = float(os.getenv("ES_REQUEST_TIMEOUT", "5.0"))

    # Indices & analysis
    ES_TRANSLATION_INDEX = os.getenv(
        "ES_TRANSLATION_INDEX", "index_poi_location_translation"
    )
    ES_POI_INDEX = os.getenv("ES_POI_INDEX", "index_poi_raw2_global")
    ES_ANALYZER = os.getenv("ES_ANALYZER", "index_analyzer")

    # Suggestions
    SUGGEST_LANGUAGE = os.getenv("SUGGEST_LANGUAGE", "zh-tw")
    SUGGEST_SIZE = int(os.getenv("SUGGEST_SIZE", "10"))

    # Category aggregation
    GROUP_BY_PAGE_SIZE = int(os.getenv("GROUP_BY_PAGE_SIZE", "1000"))
    GROUP_BY_MAX_PAGES = int(os.getenv("GROUP_BY_MAX_PAGES", "10"))

    # POI list
    POI_PAGE_SIZE = int(os.getenv("POI_PAGE_SIZE", "20"))
    POI_MAX_PAGE_SIZE = int(os.getenv("POI_MAX_PAGE_SIZE", "100"))
    POI_SOURCE_FIELDS = [
        "place_id",
        "main_title",
        "user_ratings_total",
        "rating",
        "category",
        "custom_sub_category",
        "custom_main_category",
        "address",
        "location",
    ]

    # Map asset build
    MAP_SVG_PATH = os.getenv("MAP_SVG_PATH", "assets/world.svg")
    MAP_PATHS_JSON_PATH = os.getenv("MAP_PATHS_JSON_PATH", "assets/mapPaths.json")
    MAP_VIEWBOX = os.getenv("MAP_VIEWBOX", "0 0 1000 600")

    # Proxy service
    SERVICE_HOST = os.getenv("SERVICE_HOST", "127.0.0.1")
    APP_PORT = int(os.getenv("APP_PORT", "8000"))


settings = Settings()
