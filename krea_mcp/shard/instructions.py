from __future__ import annotations

# Tool descriptions used by FastMCP when registering tools. Keep short and clear.
TOOL_DESCRIPTIONS: dict[str, str] = {
    "krea_list_models": "Returns the supported Krea image generation models and their required fields.",
    "krea_generate_image": "Generates an image using Krea API with selectable model and optional polling until completion.",
    "krea_upscale_image": "Upscales and enhances an image using Krea Topaz enhance endpoints (standard, generative, bloom).",
}


# High-level, concise server instructions for agents.
SERVER_INSTRUCTIONS: str = (
    "Krea Image MCP Server - Agent Instructions.\n"
    "Role: This server exposes three tools: krea_list_models, krea_generate_image and krea_upscale_image. "
    "Jobs run asynchronously on the Krea API; tools can wait for them and return result URLs.\n\n"
    "Workflow (short):\n"
    "1) Call krea_list_models to discover model keys and their required fields.\n"
    "2) Call krea_generate_image with a model key and every field that model requires "
    "(reference_images for runway_gen_4_image, image_url for seededit_3).\n"
    "3) Call krea_upscale_image with a mode (standard | generative | bloom), an image_url and the target size.\n\n"
    "Hard rules (must follow):\n"
    "- Upscale parameters are mode-gated; passing a parameter to a mode that does not support it fails the call.\n"
    "- Bloom mode is limited to 10000x10000 and only accepts model 'Reimagine'.\n"
    "- Generative mode accepts creativity 1 to 6.\n\n"
    "Outputs and failures (summary):\n"
    "- Calls return a short text summary and a structured payload with job_id, status, image_urls, "
    "error and the raw job records.\n"
    "- Set wait_for_completion=false to get the job id immediately without polling.\n"
    "- Validation, API and timeout failures surface as MCP ToolErrors with a descriptive message."
)


__all__ = ["TOOL_DESCRIPTIONS", "SERVER_INSTRUCTIONS"]
