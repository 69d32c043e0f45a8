"""REPL for the Postdesk CLI."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from postdesk.cli.terminal import TerminalNotifier, print_errors, print_post, print_post_preview
from postdesk.kernel.cache import PostCache
from postdesk.kernel.capabilities import Notifier, PostStore, RecordingNavigator, SessionContext
from postdesk.kernel.interaction import CreatePostView, HomeView, PostDetailView, View
from postdesk.kernel.orchestrator import MutationOrchestrator
from postdesk.kernel.types import CREATE_PATH, EDITABLE_FIELDS, LIST_PATH

HELP = {
    "home": """
  Post list:
    /list          - Show all posts
    /open <n>      - Open post number <n>
    /new           - Write a new post
    /refresh       - Re-fetch posts
""",
    "create": """
  New post:
    /set <field> <text> - Set title, description or content
    /show               - Show the draft and its errors
    /submit             - Create the post
    /cancel             - Back to the list
""",
    "detail": """
  Post:
    /edit                - Open the edit dialog
    /set <field> <text>  - Change a field (edit dialog open)
    /submit              - Save the edit
    /cancel              - Close the edit dialog without saving
    /delete              - Delete this post (asks to confirm)
    /back                - Go back
""",
}


class Repl:
    """Interactive REPL. Routes between the list, create, and detail views."""

    def __init__(
        self,
        store: PostStore,
        session: SessionContext,
        *,
        refetch_after_mutation: bool = False,
        notifier: Notifier | None = None,
        input_func: Callable[[str], str] = input,
    ):
        self.store = store
        self.cache = PostCache()
        self.navigator = RecordingNavigator(start=LIST_PATH)
        self.orchestrator = MutationOrchestrator(
            store,
            self.cache,
            notifier or TerminalNotifier(),
            self.navigator,
            session,
            refetch_after_mutation=refetch_after_mutation,
        )
        self.view: View | None = None
        self.running = True
        self._path: str | None = None
        self._input = input_func

    async def start(self):
        """Start the REPL."""
        await self._route()

        while self.running:
            try:
                line = (await asyncio.to_thread(self._input, "posts > ")).strip()

                if not line:
                    continue

                if line.startswith("/"):
                    await self._handle_command(line)
                    await self._route()
                else:
                    print("  Commands start with /. Type /help.")

            except (EOFError, KeyboardInterrupt):
                print()
                break
            except Exception as e:
                print(f"Error: {e}")

        if self.view:
            self.view.unmount()

    # -- routing --

    async def _route(self):
        """Swap the active view when the navigator moved."""
        path = self.navigator.current
        if path == self._path:
            return
        self._path = path
        if self.view:
            self.view.unmount()

        if path == LIST_PATH:
            home = HomeView(self.cache, self.store, self.navigator)
            self.view = home
            await home.mount()
            self._list_posts()
        elif path == CREATE_PATH:
            self.view = CreatePostView(self.orchestrator, self.navigator)
            print("  New post. Fill it in with /set, then /submit.")
        elif path.startswith("/posts/"):
            detail = PostDetailView(path.removeprefix("/posts/"), self.cache, self.orchestrator, self.navigator)
            self.view = detail
            if detail.post is None:
                print("  Post not found.")
            else:
                print_post(detail.post)
        else:
            print(f"  Unknown page: {path}")

    # -- commands --

    async def _handle_command(self, line: str):
        """Handle REPL commands for the current view."""
        parts = line.split(maxsplit=1)
        cmd = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else None

        if cmd == "/quit":
            self.running = False
            print("Goodbye.")
        elif cmd == "/help":
            self._show_help()
        elif isinstance(self.view, HomeView):
            await self._home_command(self.view, cmd, arg)
        elif isinstance(self.view, CreatePostView):
            await self._create_command(self.view, cmd, arg)
        elif isinstance(self.view, PostDetailView):
            await self._detail_command(self.view, cmd, arg)
        else:
            print(f"Unknown command: {cmd}")

    async def _home_command(self, view: HomeView, cmd: str, arg: str | None):
        if cmd == "/list":
            self._list_posts()
        elif cmd == "/refresh":
            await view.mount()
            self._list_posts()
        elif cmd == "/new":
            view.open_create()
        elif cmd == "/open":
            posts = view.posts
            try:
                idx = int(arg or "") - 1
            except ValueError:
                print("Usage: /open <number>")
                return
            if 0 <= idx < len(posts):
                view.open_post(posts[idx].id)
            else:
                print("  Invalid index. Use /list to see posts.")
        else:
            self._unknown(cmd)

    async def _create_command(self, view: CreatePostView, cmd: str, arg: str | None):
        if cmd == "/set":
            self._set_field(view.set_field, view.errors, arg)
        elif cmd == "/show":
            for name in EDITABLE_FIELDS:
                print(f"  {name}: {getattr(view.draft, name)!r}")
            print_errors(view.errors)
        elif cmd == "/submit":
            op = await view.submit()
            if op is None:
                print_errors(view.errors)
        elif cmd == "/cancel":
            view.back_to_home()
        else:
            self._unknown(cmd)

    async def _detail_command(self, view: PostDetailView, cmd: str, arg: str | None):
        if cmd == "/back":
            view.go_back()
        elif cmd == "/edit":
            if view.open_edit():
                print("  Editing. Change fields with /set, then /submit or /cancel.")
            else:
                print("  Post not found.")
        elif cmd == "/set":
            if not view.edit_open:
                print("  Open the edit dialog first with /edit.")
                return
            self._set_field(view.set_edit_field, view.edit_errors, arg)
        elif cmd == "/submit":
            if not view.edit_open:
                print("  Open the edit dialog first with /edit.")
                return
            op = await view.submit_edit()
            if op is None:
                print_errors(view.edit_errors)
            elif op.succeeded and view.post is not None:
                print_post(view.post)
        elif cmd == "/cancel":
            view.cancel_edit()
        elif cmd == "/delete":
            view.open_delete()
            print("  Are you sure you want to delete this post?")
            print("  This action cannot be undone. This will permanently delete your post.")
            while view.delete_open:
                answer = (await asyncio.to_thread(self._input, "  Yes, delete this post? [y/N] ")).strip().lower()
                if answer not in ("y", "yes"):
                    view.dismiss_delete()
                    break
                await view.confirm_delete()
        else:
            self._unknown(cmd)

    # -- helpers --

    def _list_posts(self):
        """List all posts."""
        cache = self.cache
        if cache.is_loading:
            print("  Loading...")
        elif cache.is_error:
            print("  There were some errors...")
        elif not len(cache):
            print("  No posts yet. Use /new to write one.")
        else:
            for i, post in enumerate(cache.list(), 1):
                print_post_preview(i, post)

    def _set_field(self, setter: Callable[[str, str], None], errors: dict[str, str], arg: str | None):
        name, _, value = (arg or "").partition(" ")
        if name not in EDITABLE_FIELDS:
            print(f"Usage: /set <{'|'.join(EDITABLE_FIELDS)}> <text>")
            return
        setter(name, value)
        if name in errors:
            print_errors({name: errors[name]})

    def _unknown(self, cmd: str):
        print(f"Unknown command: {cmd}")
        print("Type /help for available commands.")

    def _show_help(self):
        """Show help for the current page."""
        if isinstance(self.view, CreatePostView):
            print(HELP["create"])
        elif isinstance(self.view, PostDetailView):
            print(HELP["detail"])
        else:
            print(HELP["home"])
        print("    /help          - Show this help")
        print("    /quit          - Exit REPL")
