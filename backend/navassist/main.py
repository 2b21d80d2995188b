from __future__ import annotations

import os

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from navassist.core.pipeline import AssistantPipeline
from navassist.core.types import ChatRequest, ChatResponse, SessionSnapshot


app = FastAPI(title="NavAssist API", default_response_class=ORJSONResponse)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

pipeline = AssistantPipeline()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/chat", response_model=ChatResponse)
def chat(req: ChatRequest) -> ChatResponse:
    return pipeline.process(req.message, session_id=req.session_id)


@app.get("/sessions/{session_id}", response_model=SessionSnapshot)
def get_session(session_id: str) -> SessionSnapshot:
    if not pipeline.has_session(session_id):
        raise HTTPException(status_code=404, detail="Unknown session")
    return pipeline.snapshot(session_id)


@app.delete("/sessions/{session_id}", response_model=SessionSnapshot)
def reset_session(session_id: str) -> SessionSnapshot:
    if not pipeline.has_session(session_id):
        raise HTTPException(status_code=404, detail="Unknown session")
    return pipeline.reset(session_id)


# Local dev convenience: uvicorn entry point
if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("navassist.main:app", host="0.0.0.0", port=port, reload=True)
