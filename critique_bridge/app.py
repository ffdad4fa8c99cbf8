from __future__ import annotations

import html

from dotenv import load_dotenv
from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from .constants import (
    APP_NAME,
    AVAILABLE_MODELS,
    MAX_FILE_SIZE_BYTES,
    MAX_FILE_SIZE_MB,
    get_bridge_host,
    get_bridge_port,
)
from .errors import InvalidInputError, SubmissionInProgressError
from .logger_config import logger
from .models import InputMode
from .session import CritiqueSession

load_dotenv()

app = FastAPI(title=APP_NAME)
app.state.session = CritiqueSession()


def get_session(request: Request) -> CritiqueSession:
    return request.app.state.session


def wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


def session_payload(session: CritiqueSession) -> dict:
    return {
        "view": session.view.model_dump(mode="json"),
        "input": {
            "mode": session.state.mode.value,
            "staged_file": (
                {
                    "name": session.state.staged_file.name,
                    "mime_type": session.state.staged_file.mime_type,
                    "size": session.state.staged_file.size,
                }
                if session.state.staged_file
                else None
            ),
            "staged_lyrics": session.state.staged_lyrics,
            "auxiliary_lyrics": session.state.auxiliary_lyrics,
        },
    }


def respond(request: Request, session: CritiqueSession) -> Response:
    if wants_html(request):
        return RedirectResponse("/", status_code=303)
    return JSONResponse(content=session_payload(session))


def run_event(request: Request, action) -> Response:
    session = get_session(request)
    try:
        action(session)
    except SubmissionInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return respond(request, session)


def render_page(session: CritiqueSession) -> str:
    view = session.view
    state = session.state
    model_options = "".join(
        f'<option value="{name}"{" selected" if name == view.selected_model else ""}>{name}</option>'
        for name in AVAILABLE_MODELS
    )
    upload_hidden = "" if view.mode == InputMode.UPLOAD else " hidden"
    lyrics_hidden = "" if view.mode == InputMode.LYRICS else " hidden"
    message = f'<p class="message">{html.escape(view.message)}</p>' if view.message else ""
    summary = "" if view.summary_hidden else view.summary_html
    disabled = "" if view.submit_enabled else " disabled"
    loader = "" if view.loading else " hidden"
    return f"""<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{APP_NAME}</title></head>
<body>
<main>
<section id="input-panel">
  <form method="post" action="/mode">
    <button name="mode" value="upload">Upload Song</button>
    <button name="mode" value="lyrics">Paste Lyrics</button>
  </form>
  <form method="post" action="/model">
    <select name="model_name">{model_options}</select>
    <button>Use model</button>
  </form>
  <div id="panel-upload"{upload_hidden}>
    <form method="post" action="/file" enctype="multipart/form-data">
      <input type="file" name="file" accept="audio/*">
      <span id="file-name">{html.escape(view.file_label)}</span>
      <small>Max {MAX_FILE_SIZE_MB} MB</small>
      <button>Stage file</button>
    </form>
    <form method="post" action="/auxiliary-lyrics">
      <textarea name="text">{html.escape(state.auxiliary_lyrics)}</textarea>
      <button>Save lyrics (optional)</button>
    </form>
  </div>
  <div id="panel-lyrics"{lyrics_hidden}>
    <form method="post" action="/lyrics">
      <textarea name="text">{html.escape(state.staged_lyrics)}</textarea>
      <button>Save lyrics</button>
    </form>
  </div>
  {message}
  <form method="post" action="/submit"><button id="submit-button"{disabled}>Critique</button></form>
  <section id="score-summary-container">{summary}</section>
</section>
<section id="result-container">
  <div id="loader"{loader}>Analyzing...</div>
  <div id="result-text">{view.document_html}</div>
</section>
</main>
</body>
</html>
"""


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    return HTMLResponse(render_page(get_session(request)))


@app.get("/state")
async def state(request: Request) -> JSONResponse:
    return JSONResponse(content=session_payload(get_session(request)))


@app.post("/mode")
async def select_mode(request: Request, mode: InputMode = Form(...)) -> Response:
    return run_event(request, lambda session: session.select_mode(mode))


@app.post("/model")
async def select_model(request: Request, model_name: str = Form(...)) -> Response:
    return run_event(request, lambda session: session.select_model(model_name))


@app.post("/file")
async def upload_file(request: Request, file: UploadFile = File(...)) -> Response:
    data = await file.read(MAX_FILE_SIZE_BYTES + 1)
    name = file.filename or "upload"
    mime_type = file.content_type or ""
    return run_event(request, lambda session: session.stage_file(name, mime_type, data))


@app.post("/file/clear")
async def clear_file(request: Request) -> Response:
    return run_event(request, lambda session: session.clear_file())


@app.post("/lyrics")
async def set_lyrics(request: Request, text: str = Form("")) -> Response:
    return run_event(request, lambda session: session.set_lyrics(text))


@app.post("/auxiliary-lyrics")
async def set_auxiliary_lyrics(request: Request, text: str = Form("")) -> Response:
    return run_event(request, lambda session: session.set_auxiliary_lyrics(text))


@app.post("/submit")
async def submit(request: Request) -> Response:
    session = get_session(request)
    try:
        view = await session.submit()
    except SubmissionInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    logger.info(
        "Submit finished: mode=%s model=%s summary=%s message=%s",
        view.mode.value,
        view.selected_model,
        "shown" if not view.summary_hidden else "hidden",
        view.message,
    )
    return respond(request, session)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=get_bridge_host(), port=get_bridge_port(), log_level="info")
