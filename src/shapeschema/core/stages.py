CONVERT_STAGES = [
    ("load_config", "Load config"),
    ("resolve_shapes", "Resolve shapes"),
    ("convert", "Convert"),
    ("check_schema", "Check schema"),
    ("write_output", "Write output"),
]

LIST_SHAPES_STAGES = [
    ("discover_shapes", "Discover shapes"),
]


STAGE_ORDER = {
    "convert": CONVERT_STAGES,
    "list-shapes": LIST_SHAPES_STAGES,
}


STAGE_LABELS = {
    command: {stage_id: label for stage_id, label in stages}
    for command, stages in STAGE_ORDER.items()
}
