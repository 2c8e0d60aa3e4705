from dataclasses import asdict
import json
import os
import sys

from fastapi import FastAPI, HTTPException, Request

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from scrimstats.dashboard import Dashboard

app = FastAPI(title="scrimstats")
dashboard = Dashboard.from_env()
print(f"[DATA] Match files: {os.path.abspath(dashboard.data_dir)}")
print(f"[DATA] Teams file:  {os.path.abspath(dashboard.teams_path)}")


def _not_found(what: str, key: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{what} {key} not found")


@app.get("/api/summary")
async def summary() -> dict:
    return dashboard.summary()


@app.get("/api/status")
async def status() -> dict:
    return asdict(dashboard.status())


@app.post("/api/reload")
async def reload_matches() -> dict:
    new_ids = dashboard.reload_matches()
    return {"message": "Matches reloaded successfully", "new_match_ids": new_ids}


@app.post("/api/reload-teams")
async def reload_teams() -> dict:
    try:
        teams = dashboard.reload_teams()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid teams file: {str(e)}")
    return {"message": "Teams reloaded successfully", "teams_count": len(teams)}


@app.post("/api/reload-all")
async def reload_all() -> dict:
    try:
        status = dashboard.reload_all()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid teams file: {str(e)}")
    return {"message": "Teams and matches reloaded successfully", "status": asdict(status)}


@app.get("/api/team-id-by-player/{player_id}")
async def team_id_by_player(player_id: str) -> dict:
    team_id = dashboard.team_id_by_player(player_id)
    if team_id is None:
        raise _not_found("Team for player", player_id)
    return {"player_id": player_id, "team_id": team_id}


@app.get("/api/players/{player_id}")
async def player(player_id: str) -> dict:
    view = dashboard.player_view(player_id)
    if view is None:
        raise _not_found("Player", player_id)
    return view


@app.post("/api/player-stats-for-matches/{player_id}")
async def player_stats_for_matches(player_id: str, request: Request) -> dict:
    body = await request.body()
    try:
        payload = json.loads(body) if body.strip() else {}
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON")
    match_ids = (payload or {}).get("match_ids") if isinstance(payload, dict) else None
    if match_ids is not None and not isinstance(match_ids, list):
        raise HTTPException(status_code=400, detail="match_ids must be a list")
    stats = dashboard.player_stats_for_matches(player_id, match_ids)
    if stats is None:
        raise _not_found("Player", player_id)
    return asdict(stats)


@app.get("/api/players/{player_id}/champions")
async def player_champions(player_id: str) -> dict:
    rows = dashboard.per_champion(player_id)
    if rows is None:
        raise _not_found("Player", player_id)
    return {"player_id": player_id, "champions": rows}


@app.get("/api/players/{player_id}/radar")
async def player_radar(player_id: str) -> dict:
    radar = dashboard.radar(player_id)
    if radar is None:
        raise _not_found("Player", player_id)
    return radar


@app.get("/api/players/{player_id}/evolution")
async def player_evolution(player_id: str, period: str = "week") -> dict:
    period_key = str(period or "week").strip().lower()
    if period_key not in {"week", "month"}:
        raise HTTPException(status_code=400, detail="period must be one of: week, month")
    series = dashboard.evolution(player_id, period_key)
    if series is None:
        raise _not_found("Player", player_id)
    return series


@app.get("/api/matches/{match_id}/recap")
async def match_recap(match_id: str) -> dict:
    recap = dashboard.recap(match_id)
    if recap is None:
        raise _not_found("Match", match_id)
    return {
        "recap": asdict(recap),
        "objectives": dashboard.match_objectives(match_id),
    }


@app.get("/api/scrims")
async def scrims() -> dict:
    rows = dashboard.scrims()
    return {"scrims": rows, "count": len(rows)}


if __name__ == "__main__":
    import uvicorn

    print("Starting scrimstats web server...")
    print("Open http://localhost:5000/docs in your browser")
    uvicorn.run(app, host="127.0.0.1", port=5000)
