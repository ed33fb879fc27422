from fastapi import FastAPI

from sample_api import cars, docs, legacy, oauth

app = FastAPI()
app.include_router(cars.router)
app.include_router(oauth.router)
app.include_router(docs.router)
app.add_route("/legacy", legacy.LegacyPing)
