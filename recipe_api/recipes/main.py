from recipe_api.framework.app import create_microservice
from recipe_api.recipes.dependencies import get_store

app = create_microservice("recipes", get_store)
