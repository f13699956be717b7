from fastapi import FastAPI

from process_audio.api.routes.experiments import router as experiments_router

app = FastAPI(
    title="Process Audio API",
    description="Time-aligned ingestion of experiment audio levels and transcripts into QuestDB",
    version="0.1.0",
)

app.include_router(experiments_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
