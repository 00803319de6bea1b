# fitfusion/routes/program_routes.py

from flask import Blueprint, current_app, request

from .. import db
from ..auth import UserContext, auth_required
from ..errors import NotFound, envelope
from ..models.program import Program
from ..schemas import CompleteProgramWorkout, ProgramIn
from .utils import commit, json_body, merged, paginate, parse_id, validate

programs_bp = Blueprint("programs", __name__)


def _get_program(ctx: UserContext, raw_id) -> Program:
    program_id = parse_id(raw_id, "program")
    program = Program.query.filter_by(id=program_id, user_id=ctx.user_id).first()
    if not program:
        raise NotFound("Program not found")
    return program


# ------------------------------
# CRUD
# ------------------------------
@programs_bp.route("", methods=["POST"])
@auth_required
def create_program(ctx: UserContext):
    data = validate(ProgramIn, json_body())

    program = Program(user_id=ctx.user_id)
    program.apply(data.to_columns())
    db.session.add(program)
    commit("create program")

    current_app.logger.info(f"[programs/create] user_id={ctx.user_id} program_id={program.id}")
    return envelope(True, "Program created successfully", program.to_dict(), 201)


@programs_bp.route("", methods=["GET"])
@auth_required
def list_programs(ctx: UserContext):
    q = Program.query.filter(Program.user_id == ctx.user_id)

    for arg, column in (
        ("status", Program.status),
        ("goal", Program.goal),
        ("difficulty", Program.difficulty),
    ):
        value = request.args.get(arg)
        if value:
            q = q.filter(column == value)

    items, meta = paginate(q.order_by(Program.created_at.desc(), Program.id.desc()))
    data = {"programs": [p.to_dict() for p in items], "pagination": meta}
    return envelope(True, "Programs retrieved successfully", data)


@programs_bp.route("/<program_id>", methods=["GET"])
@auth_required
def get_program(ctx: UserContext, program_id):
    program = _get_program(ctx, program_id)
    return envelope(True, "Program retrieved successfully", program.to_dict())


@programs_bp.route("/<program_id>", methods=["PUT"])
@auth_required
def update_program(ctx: UserContext, program_id):
    program = _get_program(ctx, program_id)

    data = validate(ProgramIn, merged(program, json_body()))
    program.apply(data.to_columns())
    commit("update program")

    return envelope(True, "Program updated successfully", program.to_dict())


@programs_bp.route("/<program_id>", methods=["DELETE"])
@auth_required
def delete_program(ctx: UserContext, program_id):
    program = _get_program(ctx, program_id)
    db.session.delete(program)
    commit("delete program")
    return envelope(True, "Program deleted successfully", None)


# ------------------------------
# Lifecycle
# ------------------------------
@programs_bp.route("/<program_id>/start", methods=["POST"])
@auth_required
def start_program(ctx: UserContext, program_id):
    program = _get_program(ctx, program_id)
    program.start()
    commit("start program")

    current_app.logger.info(f"[programs/start] user_id={ctx.user_id} program_id={program.id}")
    return envelope(True, "Program started successfully", program.to_dict())


@programs_bp.route("/<program_id>/complete-workout", methods=["POST"])
@auth_required
def complete_program_workout(ctx: UserContext, program_id):
    program = _get_program(ctx, program_id)
    data = validate(CompleteProgramWorkout, json_body())

    if not program.complete_workout(data.week_number, data.workout_index):
        raise NotFound("Workout not found in program")
    commit("complete program workout")

    return envelope(True, "Program workout marked as completed", program.to_dict())
