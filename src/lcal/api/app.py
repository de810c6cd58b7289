from fastapi import FastAPI
from lcal.api.public import router as public_router

app = FastAPI(title="lcal public api")
app.include_router(public_router)
