import os

from recipe_api.config import get_config_for_service
from recipe_api.shared.lib.kv import open_bucket

service = get_config_for_service("recipes")

# KV_URL wins over config.yaml, e.g. KV_URL=redis://redis:6379/0
KV_URL = os.getenv("KV_URL", service.kv)

bucket = open_bucket(KV_URL, service.bucket)
