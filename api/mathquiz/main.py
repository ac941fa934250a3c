"""
Main FastAPI Application
Controller layer that orchestrates test generation, grading and printing services.
"""
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional
from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.responses import FileResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from mathquiz.config import COUNT_RANGE, TOPICS
from mathquiz.schemas import (
    CamelModel,
    Difficulty,
    GradeResult,
    MathTest,
    QuestionType,
    TestConfig,
)
from mathquiz.services.ai_engine import TestGenerationError, generate_math_test, get_client
from mathquiz.services.doc_generator import generate_docx
from mathquiz.services.grader import grade

# Setup Paths
BASE_DIR = Path(__file__).resolve().parents[2]
OUTPUT_DIR = BASE_DIR / "output"
STATIC_DIR = BASE_DIR / "static"

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def get_runtime_output_dir() -> Path:
    """Resolve output directory for local dev or serverless runtime."""
    if os.getenv("VERCEL"):
        return Path(tempfile.gettempdir()) / "math-quiz-output"
    return OUTPUT_DIR


class GradeRequest(CamelModel):
    test: MathTest
    answers: Dict[str, str] = {}


class RenderDocxRequest(CamelModel):
    test: MathTest
    difficulty: Optional[Difficulty] = None
    show_answers: bool = False


# Initialize FastAPI App
app = FastAPI(
    title="Math Quiz Gen API",
    description="AI-generated Grade 2 math tests with automatic grading",
    version="1.0.0"
)

# CORS Middleware (Allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount Static Files
if os.path.exists(STATIC_DIR):
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/")
async def read_root():
    """Return API status info (UI handled by the frontend)."""
    index_path = STATIC_DIR / "index.html"
    if index_path.exists():
        return FileResponse(str(index_path))
    return {"message": "Math Quiz Gen API is running."}


def get_api_key_header(
    x_gemini_api_key: Optional[str] = Header(default=None, alias="X-Gemini-API-Key"),
) -> Optional[str]:
    return x_gemini_api_key


@app.get("/api/topics")
async def list_topics():
    """Options for the configuration panel."""
    return {
        "topics": TOPICS,
        "difficulties": [difficulty.value for difficulty in Difficulty],
        "question_types": [question_type.value for question_type in QuestionType],
        "count_range": {"min": COUNT_RANGE[0], "max": COUNT_RANGE[1]},
    }


@app.post("/api/generate-test", response_model=MathTest)
def generate_test(
    config: TestConfig,
    api_key: Optional[str] = Depends(get_api_key_header),
):
    """
    Generate a new test from the configuration panel settings.

    Args:
        config: Topics, question count (5-20), difficulty and title.
        api_key: Optional Gemini key from the X-Gemini-API-Key header.

    Returns:
        The generated test (camelCase JSON).
    """
    try:
        client = get_client(api_key)
        return generate_math_test(client, config)
    except TestGenerationError as e:
        raise HTTPException(status_code=502, detail=f"Generation error: {str(e)}")
    except ValueError as e:
        # API Key or configuration errors
        raise HTTPException(status_code=500, detail=f"Configuration error: {str(e)}")
    except Exception as e:
        print(f"Error during test generation: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@app.post("/api/grade", response_model=GradeResult)
async def grade_test(request: GradeRequest):
    """Grade submitted answers against the test's answer key."""
    return grade(request.test, request.answers)


@app.post("/api/render-docx")
async def render_docx(request: RenderDocxRequest):
    """Render the exam paper (optionally with the answer key) and return the file."""
    output_filename = f"math_test_{os.urandom(4).hex()}.docx"
    runtime_output_dir = get_runtime_output_dir()
    runtime_output_dir.mkdir(parents=True, exist_ok=True)
    output_path = runtime_output_dir / output_filename

    generate_docx(
        request.test,
        str(output_path),
        difficulty=request.difficulty,
        show_answers=request.show_answers,
    )

    return FileResponse(
        str(output_path),
        filename=output_filename,
        media_type=DOCX_MEDIA_TYPE,
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Math Quiz Gen API"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
