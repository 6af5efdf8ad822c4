from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import caller_identity
from ..container import Container
from ..core.enums import StatsView


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard/stats", endpoint="dashboard_stats")
    def dashboard_stats():
        view = request.args.get("view", StatsView.AGGREGATE.value)
        stats = container.operations.get_dashboard_stats(caller_identity(container.auth_verifier), view=view)
        if isinstance(stats, (list, tuple)):
            return jsonify([s.as_dict() for s in stats])
        return jsonify(stats.as_dict())
