from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.transform import router as transform_router
from shared.constants import API_VERSION

app = FastAPI(title="eviltransform", version=API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(transform_router)


@app.get("/health")
def health_check():
    return {"status": "ok", "version": API_VERSION}
