"""NiceGUI chat interface backed by ChatOrchestrator."""

from nicegui import ui

from chatbridge.models.schemas import Provider
from chatbridge.ui.orchestrator import ChatOrchestrator
from chatbridge.ui.state import (
    ChatState,
    Message,
    Theme,
    clear_chat,
    cycle_theme,
    dismiss_error,
    select_provider,
    toggle_settings,
)

PROVIDER_NAMES = {Provider.GEMINI: "Gemini Pro", Provider.OPENAI: "OpenAI"}

THEME_ICONS = {Theme.LIGHT: "light_mode", Theme.DARK: "dark_mode", Theme.SYSTEM: "computer"}

# ui.dark_mode: True = dark, False = light, None = follow the system
DARK_MODE_VALUES = {Theme.LIGHT: False, Theme.DARK: True, Theme.SYSTEM: None}

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    .header { background: linear-gradient(135deg, #3b82f6 0%, #9333ea 100%); }

    .message-user {
        background: linear-gradient(135deg, #3b82f6 0%, #9333ea 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #ffffff;
        color: #111827;
        border: 1px solid #e5e7eb;
        border-radius: 18px 18px 18px 4px;
    }
    .body--dark .message-assistant {
        background: #1f2937;
        color: #f9fafb;
        border-color: #374151;
    }

    .avatar-user { background: linear-gradient(135deg, #22c55e 0%, #059669 100%); }
    .avatar-assistant { background: linear-gradient(135deg, #3b82f6 0%, #9333ea 100%); }

    .typing-dot {
        width: 8px; height: 8px;
        background: #9ca3af;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.1s; }
    .typing-dot:nth-child(3) { animation-delay: 0.2s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    dark = ui.dark_mode(DARK_MODE_VALUES[Theme.SYSTEM])

    messages_container: ui.column
    banner_container: ui.column
    settings_container: ui.column
    subtitle: ui.label
    theme_btn: ui.button
    input_field: ui.textarea
    send_btn: ui.button

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "smart_toy"
        with ui.element("div").classes(
            f"w-8 h-8 rounded-full flex items-center justify-center shrink-0 {css}"
        ):
            ui.icon(icon).classes("text-white text-lg")

    def render_message(msg: Message) -> None:
        is_user = msg.role == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-start no-wrap"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 shadow-sm {bubble}"):
                    ui.label(msg.content).classes(
                        "text-sm leading-relaxed whitespace-pre-wrap break-words"
                    )
                ui.label(msg.timestamp.astimezone().strftime("%I:%M %p")).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )
            if is_user:
                render_avatar(True)

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start gap-3 items-start"):
            render_avatar(False)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")

    def render_empty(state: ChatState) -> None:
        with ui.column().classes("w-full py-12 items-center justify-center gap-3"):
            ui.icon("smart_toy").classes("text-5xl text-blue-500")
            ui.label("Welcome to AI Chat").classes("text-2xl font-semibold")
            ui.label(
                "Start a conversation by typing a message below."
            ).classes("text-gray-500 text-center")
            ui.label(f"Currently using: {PROVIDER_NAMES[state.provider]}").classes(
                "text-sm text-gray-400"
            )

    def render_messages(state: ChatState) -> None:
        messages_container.clear()
        with messages_container:
            if not state.messages:
                render_empty(state)
            for msg in state.messages:
                render_message(msg)
            if state.is_loading:
                render_typing_indicator()

    def render_banner(state: ChatState) -> None:
        banner_container.clear()
        if not state.error:
            return
        with banner_container, ui.row().classes(
            "w-full items-center gap-2 rounded-lg p-3 bg-red-50 border border-red-200 no-wrap"
        ):
            ui.icon("error_outline").classes("text-red-500")
            ui.label(state.error).classes("text-sm text-red-700 flex-grow")
            ui.button(
                icon="close", on_click=lambda: orchestrator.dispatch(dismiss_error)
            ).props("flat round dense color=red")

    def render_settings(state: ChatState) -> None:
        settings_container.clear()
        if not state.show_settings:
            return
        with settings_container, ui.card().classes("w-full"):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Settings").classes("text-sm font-medium")
                ui.button(
                    "Clear Chat", on_click=lambda: orchestrator.dispatch(clear_chat)
                ).props("flat dense color=red")
            ui.label("AI Provider").classes("text-sm text-gray-500")
            ui.toggle(
                {p: PROVIDER_NAMES[p] for p in Provider},
                value=state.provider,
                on_change=lambda e: orchestrator.dispatch(select_provider, Provider(e.value)),
            )

    def render(state: ChatState) -> None:
        dark.set_value(DARK_MODE_VALUES[state.theme])
        theme_btn.props(f"icon={THEME_ICONS[state.theme]}")
        subtitle.set_text(f"Powered by {PROVIDER_NAMES[state.provider]}")
        input_field.value = state.input
        input_field.set_enabled(not state.is_loading)
        send_btn.set_enabled(not state.is_loading)
        render_settings(state)
        render_banner(state)
        render_messages(state)

    orchestrator = ChatOrchestrator(on_change=render)

    async def send_message() -> None:
        await orchestrator.submit()

    # === UI Layout ===
    with ui.column().classes("w-full max-w-4xl mx-auto h-screen no-wrap gap-0"):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("smart_toy").classes("text-white text-3xl")
                with ui.column().classes("gap-0"):
                    ui.label("AI Chat Assistant").classes("text-lg font-semibold text-white")
                    subtitle = ui.label().classes("text-xs text-white/80")
            with ui.row().classes("items-center gap-2"):
                ui.button(
                    icon="settings", on_click=lambda: orchestrator.dispatch(toggle_settings)
                ).props("flat round color=white")
                theme_btn = ui.button(
                    on_click=lambda: orchestrator.dispatch(cycle_theme)
                ).props("flat round color=white")

        settings_container = ui.column().classes("w-full px-4 pt-2")
        banner_container = ui.column().classes("w-full px-4 pt-2")

        # Messages
        with ui.scroll_area().classes("flex-grow w-full"), ui.column().classes("w-full p-5"):
            messages_container = ui.column().classes("w-full gap-4")

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end border-t no-wrap"):
            input_field = (
                ui.textarea(
                    placeholder="Type your message...",
                    on_change=lambda e: orchestrator.update_input(e.value or ""),
                )
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")
        ui.label("Press Enter to send").classes("w-full text-center text-xs text-gray-400 pb-2")

    render(orchestrator.state)
