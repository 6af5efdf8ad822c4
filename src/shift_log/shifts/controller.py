from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import caller_identity, json_body, page_json, point_json, shift_json, worker_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    ops = container.operations

    def identity():
        return caller_identity(container.auth_verifier)

    @app.route("/shifts/clock-in", methods=["POST"], endpoint="clock_in")
    def clock_in():
        body = json_body()
        shift = ops.clock_in(
            identity(),
            note=body.get("note"),
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
        )
        return jsonify(shift_json(shift)), 201

    @app.route("/shifts/clock-out", methods=["POST"], endpoint="clock_out")
    def clock_out():
        body = json_body()
        shift = ops.clock_out(
            identity(),
            note=body.get("note"),
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
        )
        return jsonify(shift_json(shift))

    @app.route("/shifts/active", endpoint="active_shift")
    def active_shift():
        shift = ops.get_own_active_shift(identity())
        return jsonify(shift_json(shift) if shift else None)

    @app.route("/shifts/history", endpoint="shift_history")
    def shift_history():
        page = ops.get_own_shifts(
            identity(),
            page=request.args.get("page", 1),
            page_size=request.args.get("limit", 10),
        )
        return jsonify(page_json(page, shift_json))

    @app.route("/shifts/logs", endpoint="shift_logs")
    def shift_logs():
        page = ops.get_all_shift_logs(
            identity(),
            page=request.args.get("page", 1),
            page_size=request.args.get("limit", 50),
            started_from=request.args.get("start_date"),
            started_before=request.args.get("end_date"),
        )

        def entry_json(entry) -> dict:
            out = shift_json(entry.shift)
            out["worker"] = worker_json(entry.worker)
            return out

        return jsonify(page_json(page, entry_json))

    @app.route("/staff/active", endpoint="active_staff")
    def active_staff():
        rows = ops.get_active_workers(identity())
        return jsonify(
            [
                {
                    **worker_json(a.worker),
                    "shift_id": a.shift.shift_id,
                    "clock_in_at": a.shift.clock_in_at.isoformat(),
                    "clock_in_location": point_json(a.shift.clock_in_location),
                    "note": a.shift.clock_in_note,
                    "status": a.shift.status.value,
                }
                for a in rows
            ]
        )
