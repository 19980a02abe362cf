"""FastAPI server that serves the player page and the session API."""

from __future__ import annotations

from threading import Thread

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import uvicorn

from trivia_app.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from trivia_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from trivia_app.core.text_renderer import render_text
from trivia_app.core.session_controller import SessionController

_PLAYER_PAGE_HTML = """<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>TriviaQt</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.4); }
      .hidden { display: none; }
      .primary-button { border: none; border-radius: 0.75rem; padding: 0.85rem 1.5rem; font-size: 1rem; background: #1f9aa5; color: #fff; cursor: pointer; }
      .primary-button:hover { background: #16808a; }
      .primary-button:disabled { opacity: 0.6; cursor: not-allowed; }
      .question { margin-bottom: 1.25rem; }
      .question p { font-size: 1.1rem; line-height: 1.5; margin: 0 0 0.5rem; }
      .question label { display: block; padding: 0.25rem 0; cursor: pointer; }
      #username { padding: 0.6rem; border-radius: 0.5rem; border: none; font-size: 1rem; }
      #error { color: #facc15; }
      table { border-collapse: collapse; width: 100%; }
      th, td { text-align: left; padding: 0.4rem 0.6rem; border-bottom: 1px solid #1e293b; }
    </style>
  </head>
  <body>
    <form id=\"trivia-form\" class=\"card\">
      <div id=\"loading-container\">Loading questions…</div>
      <p id=\"error\" class=\"hidden\"></p>
      <div id=\"question-container\" class=\"hidden\"></div>
      <input type=\"text\" id=\"username\" placeholder=\"Enter your name\" />
      <button type=\"submit\" id=\"submit-game\" class=\"primary-button\">Finish Game</button>
      <button type=\"button\" id=\"new-player\" class=\"primary-button hidden\">New Player</button>
    </form>
    <section class=\"card\">
      <h2>Scores</h2>
      <table id=\"score-table\">
        <thead><tr><th>Player</th><th>Score</th></tr></thead>
        <tbody></tbody>
      </table>
    </section>
    <script>
      const form = document.getElementById('trivia-form');
      const questionContainer = document.getElementById('question-container');
      const loadingContainer = document.getElementById('loading-container');
      const errorEl = document.getElementById('error');
      const usernameInput = document.getElementById('username');
      const newPlayerButton = document.getElementById('new-player');
      const submitButton = document.getElementById('submit-game');
      const scoreTableBody = document.querySelector('#score-table tbody');

      let renderedGeneration = null;
      let generation = null;

      function setVisibility(element, isVisible) {
        if (isVisible) {
          element.classList.remove('hidden');
        } else {
          element.classList.add('hidden');
        }
      }

      function escapeText(value) {
        const span = document.createElement('span');
        span.textContent = String(value);
        return span.innerHTML;
      }

      function showLoading(isLoading) {
        setVisibility(loadingContainer, isLoading);
        setVisibility(questionContainer, !isLoading);
        newPlayerButton.disabled = isLoading;
        submitButton.disabled = isLoading;
      }

      function displayQuestions(state) {
        if (renderedGeneration === state.generation) {
          return;
        }
        renderedGeneration = state.generation;
        questionContainer.innerHTML = state.questions.map((question) => `
          <div class="question">
            <p>${question.question_html}</p>
            ${question.options.map((option) => `
              <label>
                <input type="radio" name="answer${question.index}" value="${option.index}"
                  data-question="${question.index}" data-correct="${option.is_correct}"
                  ${question.selected_option === option.index ? 'checked' : ''}>
                ${option.label_html}
              </label>`).join('')}
          </div>`).join('');
      }

      function displayScores(entries) {
        scoreTableBody.innerHTML = entries.map((entry) => `
          <tr><td>${escapeText(entry.username)}</td><td>${escapeText(entry.score)}</td></tr>`).join('');
      }

      function applyState(state) {
        generation = state.generation;
        const isLoading = state.phase === 'LOADING' || state.phase === 'INITIALIZING' || state.phase === 'RESETTING';
        showLoading(isLoading);
        setVisibility(newPlayerButton, state.has_identity);
        if (state.phase === 'ERROR') {
          errorEl.textContent = 'Could not load questions. Press New Player to try again.';
          setVisibility(errorEl, true);
          setVisibility(newPlayerButton, true);
          questionContainer.innerHTML = '';
          renderedGeneration = null;
        } else {
          setVisibility(errorEl, false);
        }
        if (!isLoading && state.phase !== 'ERROR') {
          displayQuestions(state);
        }
        displayScores(state.leaderboard);
        return isLoading;
      }

      async function refreshUntilSettled(state) {
        while (applyState(state)) {
          await new Promise((resolve) => setTimeout(resolve, 500));
          const response = await fetch('state');
          state = await response.json();
        }
      }

      async function post(path, payload) {
        const response = await fetch(path, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(payload ?? {})
        });
        return { ok: response.ok, body: await response.json() };
      }

      async function startSession() {
        const { body } = await post('session/start');
        if (body.username) {
          usernameInput.value = body.username;
        }
        await refreshUntilSettled(body);
      }

      form.addEventListener('submit', async (event) => {
        event.preventDefault();
        const username = usernameInput.value.trim();
        if (!username) {
          return;
        }
        const { body } = await post('submit', { generation, username });
        if (body.accepted) {
          alert('Game finished! Your final score: ' + body.final_score);
        }
        applyState(body.state);
      });

      newPlayerButton.addEventListener('click', async () => {
        newPlayerButton.disabled = true;
        const { ok, body } = await post('new-player');
        if (!ok) {
          return;
        }
        usernameInput.value = '';
        questionContainer.innerHTML = '';
        renderedGeneration = null;
        await refreshUntilSettled(body);
      });

      document.addEventListener('change', async (event) => {
        if (!event.target.matches('input[type="radio"]')) {
          return;
        }
        await post('select', {
          generation,
          question_index: Number(event.target.dataset.question),
          option_index: Number(event.target.value)
        });
      });

      startSession().catch((error) => console.error('Error starting session:', error));
    </script>
  </body>
</html>
"""


class SelectPayload(BaseModel):
    """Payload schema for an answer selection."""

    generation: int | None = None
    question_index: int
    option_index: int


class SubmitPayload(BaseModel):
    """Payload schema for finishing a round."""

    generation: int | None = None
    username: str = ""


def _get_controller_dependency(controller: SessionController):
    def dependency() -> SessionController:
        return controller

    return dependency


def _serialize_state(controller: SessionController) -> dict[str, object]:
    state = controller.state
    questions = []
    for index, (question, options) in enumerate(zip(state.questions, state.answer_options)):
        questions.append(
            {
                "index": index,
                "question_html": render_text(question.text),
                "category": question.category,
                "difficulty": question.difficulty,
                "selected_option": state.selections.get(index),
                "options": [
                    {
                        "index": option_index,
                        "label_html": render_text(option.label),
                        "is_correct": option.is_correct,
                    }
                    for option_index, option in enumerate(options)
                ],
            }
        )
    return {
        "phase": controller.phase.name,
        "generation": controller.generation,
        "username": state.username,
        "has_identity": controller.has_identity,
        "current_score": state.current_score,
        "final_score": controller.final_score,
        "error": controller.last_error,
        "questions": questions,
        "leaderboard": _serialize_scores(controller),
    }


def _serialize_scores(controller: SessionController) -> list[dict[str, object]]:
    return [{"username": entry.username, "score": entry.score} for entry in controller.leaderboard()]


def create_api_app(controller: SessionController) -> FastAPI:
    """Create a FastAPI application wired to the provided session controller.

    Endpoints are coroutines so that every controller call happens on the
    server's event loop, alongside the question fetch.
    """
    app = FastAPI(title=f"{APP_NAME} API", description=APP_ABOUT_TEXT, version=APP_VERSION)
    controller_dep = _get_controller_dependency(controller)

    @app.get("/", response_class=HTMLResponse)
    async def serve_player_page() -> str:
        return _PLAYER_PAGE_HTML

    @app.post("/session/start")
    async def start_session(
        background_tasks: BackgroundTasks,
        session: SessionController = Depends(controller_dep),
    ) -> dict[str, object]:
        generation = session.start()
        background_tasks.add_task(session.fetch_questions, generation)
        return _serialize_state(session)

    @app.get("/state")
    async def get_state(session: SessionController = Depends(controller_dep)) -> dict[str, object]:
        return _serialize_state(session)

    @app.get("/scores")
    async def get_scores(session: SessionController = Depends(controller_dep)) -> list[dict[str, object]]:
        return _serialize_scores(session)

    @app.post("/select")
    async def select_answer(
        payload: SelectPayload,
        session: SessionController = Depends(controller_dep),
    ) -> dict[str, object]:
        try:
            accepted = session.select_answer(
                payload.question_index,
                payload.option_index,
                generation=payload.generation,
            )
        except IndexError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if not accepted:
            raise HTTPException(status_code=409, detail="Selection does not match the current question set.")
        return _serialize_state(session)

    @app.post("/submit")
    async def submit_game(
        payload: SubmitPayload,
        session: SessionController = Depends(controller_dep),
    ) -> dict[str, object]:
        entry = session.submit(payload.username, generation=payload.generation)
        return {
            "accepted": entry is not None,
            "final_score": entry.score if entry is not None else None,
            "state": _serialize_state(session),
        }

    @app.post("/new-player")
    async def new_player(
        background_tasks: BackgroundTasks,
        session: SessionController = Depends(controller_dep),
    ) -> dict[str, object]:
        generation = session.new_player()
        if generation is None:
            raise HTTPException(status_code=409, detail="Questions are still loading.")
        background_tasks.add_task(session.fetch_questions, generation)
        return _serialize_state(session)

    return app


def start_api_server(
    controller: SessionController,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(controller)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="TriviaApiServer", daemon=True)
    thread.start()
    return thread
