"""Web chat front end connecting an OpenAI model to the MCP playlist tools."""

import json
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from mcp import ClientSession
from mcp.client.streamable_http import streamablehttp_client
from openai import AsyncOpenAI
from pydantic import BaseModel

from . import config
from .errors import ConfigurationError
from .logging_config import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = """You are YouTube AI Agent, a helpful assistant that manages playlists using MCP tools.
- Prefer real actions via the provided tools when the user needs data or playlist changes.
- When adding several videos, use the bulk add tool to avoid repeated errors.
- When a tool returns data, summarize it clearly with bullet points or short paragraphs.
- If a tool reports no results, explain that calmly and suggest a next step.
- Only invent information if you clearly label it as a suggestion."""

# MCP prompts offered to the model as functions returning guidance text
PROMPT_FUNCTIONS = [
    {
        "type": "function",
        "function": {
            "name": "curate_playlist",
            "description": "Fetch recommended guidance for building a themed playlist.",
            "parameters": {
                "type": "object",
                "properties": {
                    "theme": {"type": "string", "minLength": 1},
                    "count": {"type": "integer", "minimum": 1, "maximum": 25},
                },
                "required": ["theme"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "summarize_playlist",
            "description": "Summarize the contents of a playlist in natural language.",
            "parameters": {
                "type": "object",
                "properties": {"playlist_id": {"type": "string", "minLength": 1}},
                "required": ["playlist_id"],
            },
        },
    },
]
PROMPT_NAMES = {spec["function"]["name"] for spec in PROMPT_FUNCTIONS}

Dispatch = Callable[[str, Dict[str, Any]], Awaitable[str]]

app = FastAPI(title="YouTube Playlist Chat")


class ChatMessage(BaseModel):
    """A single chat turn."""

    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    """Request model for the chat endpoint."""

    messages: List[ChatMessage]


class ChatResponse(BaseModel):
    """Response model for the chat endpoint."""

    reply: str


def ensure_env() -> None:
    """Check the settings the chat endpoint cannot run without.

    Raises:
        ConfigurationError: If MCP_SERVER_URL or OPENAI_API_KEY is missing
    """
    if not config.MCP_SERVER_URL:
        raise ConfigurationError("MCP_SERVER_URL is not configured.")
    if not config.OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY is not configured.")


def clean_arguments(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Drop arguments the model left empty."""
    return {key: value for key, value in arguments.items() if value is not None and value != ""}


def _content_text(entry: Any) -> str:
    entry_type = getattr(entry, "type", None)
    if entry_type == "text":
        return entry.text
    if entry_type == "resource":
        resource = entry.resource
        return f"{getattr(resource, 'mimeType', None) or 'resource'}: {resource.uri}"
    if hasattr(entry, "model_dump_json"):
        return entry.model_dump_json()
    return json.dumps(entry, default=str)


def format_call_tool_result(name: str, result: Any) -> str:
    """Render an MCP tool result as text for the model."""
    content = result.content or []

    if result.isError:
        message = "\n".join(_content_text(entry) for entry in content) or "Unknown error"
        return f"Tool {name} returned an error: {message}"

    if content:
        return "\n".join(_content_text(entry) for entry in content)

    structured = getattr(result, "structuredContent", None)
    if structured:
        if isinstance(structured, str):
            return structured
        return json.dumps(structured, indent=2)

    return f"Tool {name} executed with no textual response."


def format_prompt_result(name: str, result: Any) -> str:
    """Render an MCP prompt result as guidance text for the model."""
    lines = []
    for message in result.messages:
        role = str(message.role).upper()
        if getattr(message.content, "type", None) == "text":
            lines.append(f"{role}: {message.content.text}")
        else:
            lines.append(f"{role}: {_content_text(message.content)}")
    return f"Prompt {name} returned the following guidance:\n" + "\n".join(lines)


class ToolBridge:
    """Exposes a connected MCP session's tools and prompts to the model."""

    def __init__(self, session: ClientSession):
        self.session = session

    async def openai_tools(self) -> List[Dict[str, Any]]:
        """Describe every MCP tool, plus the prompts, as OpenAI functions."""
        listing = await self.session.list_tools()
        functions = [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description or "",
                    "parameters": tool.inputSchema,
                },
            }
            for tool in listing.tools
        ]
        return functions + PROMPT_FUNCTIONS

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> str:
        try:
            result = await self.session.call_tool(name, clean_arguments(arguments))
            return format_call_tool_result(name, result)
        except Exception as e:
            logger.warning("Tool %s failed: %s", name, str(e))
            return f"Failed to execute tool {name}: {str(e)}"

    async def call_prompt(self, name: str, arguments: Dict[str, Any]) -> str:
        try:
            # Prompt arguments travel as strings
            prompt_args = {key: str(value) for key, value in clean_arguments(arguments).items()}
            result = await self.session.get_prompt(name, prompt_args)
            return format_prompt_result(name, result)
        except Exception as e:
            logger.warning("Prompt %s failed: %s", name, str(e))
            return f"Failed to fetch prompt {name}: {str(e)}"

    async def dispatch(self, name: str, arguments: Dict[str, Any]) -> str:
        if name in PROMPT_NAMES:
            return await self.call_prompt(name, arguments)
        return await self.call_tool(name, arguments)


async def complete_with_tools(
    client: AsyncOpenAI,
    messages: List[Dict[str, Any]],
    tools: List[Dict[str, Any]],
    dispatch: Dispatch,
    model: Optional[str] = None,
    max_steps: int = config.CHAT_MAX_STEPS,
) -> str:
    """Run the model, executing requested tool calls, until it answers.

    The final step disables tool use so the model must reply in text.

    Returns:
        The assistant's reply
    """
    conversation = [{"role": "system", "content": SYSTEM_PROMPT}] + list(messages)

    for step in range(max_steps):
        last_step = step == max_steps - 1
        response = await client.chat.completions.create(
            model=model or config.OPENAI_MODEL,
            messages=conversation,
            tools=tools,
            tool_choice="none" if last_step else "auto",
            temperature=config.CHAT_TEMPERATURE,
        )
        message = response.choices[0].message

        if not message.tool_calls:
            return message.content or ""

        conversation.append(
            {
                "role": "assistant",
                "content": message.content,
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {
                            "name": call.function.name,
                            "arguments": call.function.arguments,
                        },
                    }
                    for call in message.tool_calls
                ],
            }
        )

        for call in message.tool_calls:
            try:
                arguments = json.loads(call.function.arguments or "{}")
            except json.JSONDecodeError:
                output = f"Invalid arguments for {call.function.name}: {call.function.arguments}"
            else:
                logger.info("Model called %s", call.function.name)
                output = await dispatch(call.function.name, arguments)
            conversation.append({"role": "tool", "tool_call_id": call.id, "content": output})

    return ""


async def run_chat(messages: List[Dict[str, Any]]) -> str:
    """Answer a conversation using the MCP server's tools.

    Raises:
        ConfigurationError: If required settings are missing
    """
    ensure_env()
    client = AsyncOpenAI(api_key=config.OPENAI_API_KEY)

    async with streamablehttp_client(config.MCP_SERVER_URL) as (read_stream, write_stream, _):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            bridge = ToolBridge(session)
            tools = await bridge.openai_tools()
            return await complete_with_tools(client, messages, tools, bridge.dispatch)


@app.post("/api/chat", response_model=ChatResponse)
async def chat_endpoint(request: ChatRequest) -> ChatResponse:
    """Answer the latest chat turn.

    Args:
        request: Conversation so far

    Returns:
        ChatResponse: The assistant's reply
    """
    try:
        reply = await run_chat([message.model_dump() for message in request.messages])
        return ChatResponse(reply=reply)
    except Exception as e:
        logger.error("/api/chat error: %s", str(e))
        raise HTTPException(status_code=500, detail=str(e))


INDEX_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>YouTube AI Agent</title>
  <style>
    body { font-family: sans-serif; max-width: 48rem; margin: 2rem auto; }
    #log { border: 1px solid #ccc; padding: 1rem; min-height: 20rem; white-space: pre-wrap; }
    .user { color: #0b5394; } .assistant { color: #222; } .error { color: #b00; }
    form { display: flex; gap: .5rem; margin-top: 1rem; } input { flex: 1; }
  </style>
</head>
<body>
  <h1>YouTube AI Agent</h1>
  <div id="log"></div>
  <form id="form">
    <input id="input" placeholder="Ask about your playlists..." autocomplete="off">
    <button type="submit">Send</button>
  </form>
  <script>
    const messages = [];
    const log = document.getElementById("log");
    const input = document.getElementById("input");
    const append = (role, text) => {
      const div = document.createElement("div");
      div.className = role;
      div.textContent = `${role}: ${text}`;
      log.appendChild(div);
    };
    document.getElementById("form").addEventListener("submit", async (event) => {
      event.preventDefault();
      const content = input.value.trim();
      if (!content) return;
      input.value = "";
      messages.push({ role: "user", content });
      append("user", content);
      const response = await fetch("/api/chat", {
        method: "POST",
        headers: { "Content-Type": "application/json" },
        body: JSON.stringify({ messages }),
      });
      const data = await response.json();
      if (!response.ok) {
        append("error", data.detail || "Request failed");
        return;
      }
      messages.push({ role: "assistant", content: data.reply });
      append("assistant", data.reply);
    });
  </script>
</body>
</html>
"""


@app.get("/", response_class=HTMLResponse)
async def index() -> str:
    """Serve the chat page."""
    return INDEX_HTML
