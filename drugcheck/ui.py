from __future__ import annotations
import os
from typing import Callable

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from drugcheck.errors import AnalysisInProgressError
from drugcheck.services.present import build_view
from drugcheck.services.session import Session


def mount_ui(app: FastAPI, base_dir: str, get_session: Callable[[], Session]) -> None:
    """
    Mount the /ui page and its form actions.
    Expects:
      base_dir/templates/index.html
    Every action redirects back to /ui (303) so a refresh never re-submits.
    """
    templates = Jinja2Templates(directory=os.path.join(base_dir, "templates"))

    def back() -> RedirectResponse:
        return RedirectResponse(url="/ui", status_code=303)

    @app.get("/ui", response_class=HTMLResponse)
    def ui(request: Request, session: Session = Depends(get_session)):
        return templates.TemplateResponse(request, "index.html", {"view": build_view(session.state)})

    @app.post("/ui/drugs")
    def ui_add(name: str = Form(""), session: Session = Depends(get_session)):
        session.add(name)
        return back()

    @app.post("/ui/drugs/{drug_id}/remove")
    def ui_remove(drug_id: str, session: Session = Depends(get_session)):
        session.remove(drug_id)
        return back()

    @app.post("/ui/clear")
    def ui_clear(session: Session = Depends(get_session)):
        session.clear()
        return back()

    @app.post("/ui/analyze")
    def ui_analyze(session: Session = Depends(get_session)):
        try:
            session.analyze()
        except AnalysisInProgressError:
            # the button is disabled while loading; a double submit just lands back on the page
            pass
        return back()

    @app.post("/ui/retry")
    def ui_retry(session: Session = Depends(get_session)):
        try:
            session.retry()
        except AnalysisInProgressError:
            pass
        return back()
