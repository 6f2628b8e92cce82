# pages.py
"""
Page-content trees for the TX-2 website.

Every page is the shared layout (header with nav, main, footer) around a
set of sections. Sections are plain functions returning h() trees so that
pages can reuse them: the home page shows everything, /docs and /examples
show their part of it, /manifesto tells the Sketchpad story.
"""
from typing import Callable, Dict, Optional

from constants import FPS_PLACEHOLDER
from markup import Element, h

GITHUB_URL = "https://github.com/IreGaddr/tx2-ecs"
NPM_URL = "https://www.npmjs.com/package/tx2-ecs"

QUICK_START_CODE = """npm install tx2-ecs

import { World, defineComponent, Component } from 'tx2-ecs';
import { h, Render } from 'tx2-ecs/client';

class Counter extends Component {
  private countSignal = this.defineReactive('count', 0);

  get count() { return this.countSignal.get(); }
  set count(value: number) { this.countSignal.set(value); }

  clone() {
    return new Counter({ count: this.countSignal.peek() }) as this;
  }
}

const world = new World();
const entity = world.createEntity();

world.addComponent(entity.id, new Counter({ count: 0 }));
world.addComponent(entity.id, Render.create({
  render: () => {
    const counter = world.getComponent<Counter>(entity.id, 'Counter')!;
    return h('div', null,
      h('p', null, `Count: ${counter.count}`),
      h('button', {
        onclick: () => counter.count++
      }, 'Increment')
    );
  }
}));

await world.init();
world.start();"""

CORE_CODE = """// Define a component
import { Component, defineComponent } from 'tx2-ecs';

class Position extends Component {
  x = this.defineReactive('x', 0);
  y = this.defineReactive('y', 0);
  clone() { return new Position({ x: this.x.peek(), y: this.y.peek() }) as this; }
}

export const PositionC = defineComponent('Position', () => Position);

// System
import { defineSystem, createSystemId } from 'tx2-ecs';

export const MoveSystem = defineSystem({
  id: createSystemId('Move'),
  name: 'Move',
  phases: ['update'],
}, ({ world, deltaTime }) => {
  const entities = world.query({ all: ['Position'] });
  for (const entity of entities) {
    const pos = world.getComponent(entity, 'Position') as Position;
    pos.x.set(pos.x.get() + 10 * deltaTime);
  }
});

// Wiring
world.addComponent(entity.id, PositionC.create({ x: 0, y: 0 }));
world.addSystem(MoveSystem);
world.start();"""

READ_LINK_STYLE = "margin-top:0.75rem; display:inline-flex;"


def hud_panel(label: str, *children, **props) -> Element:
    """A bordered HUD box with corner marks and a caption."""
    attrs = {"class": "hud", **props}
    return h("section" if "id" in props else "div", attrs,
             h("div", {"class": "corners"}),
             h("div", {"class": "label"}, label),
             *children)


def feature_card(title: str, body: str, link: Optional[tuple] = None) -> Element:
    return h("div", {"class": "feature-card"},
             h("h3", None, title),
             h("p", None, body),
             h("a", {"href": link[1], "class": "btn ghost", "style": READ_LINK_STYLE}, link[0])
             if link else None)


def docs_item(title: str, *body) -> Element:
    return h("div", {"class": "docs-item"}, h("h4", None, title), *body)


def bullet_list(*items: str) -> Element:
    return h("ul", None, [h("li", None, item) for item in items])


def header(current_path: str) -> Element:
    def nav_link(href: str, label: str) -> Element:
        return h("a", {"href": href, "class": "active" if current_path == href else None}, label)

    return h("header", None,
        h("nav", None,
            h("div", {"class": "brand"},
                h("img", {"src": "/public/icon-pen.svg", "alt": "TX-2 Light Pen"}),
                h("span", None, "TX-2 / ECS")
            ),
            h("div", {"class": "nav-links"},
                nav_link("/", "Home"),
                nav_link("/docs", "Docs"),
                nav_link("/examples", "Examples"),
                nav_link("/manifesto", "Manifesto"),
                h("a", {"href": GITHUB_URL}, "GitHub")
            )
        )
    )


def footer() -> Element:
    return h("footer", None,
        h("span", None, "© 2025 TX-2 // Built with tx2-ecs"),
        h("span", None, "Sketchpad → TX-2 → Web")
    )


def layout(current_path: str, *sections) -> Element:
    return h("div", {"id": "app", "class": "layout", "data-path": current_path},
        header(current_path),
        h("main", None, *sections),
        footer()
    )


def hud_widget(count: int = 0) -> Element:
    """
    The live HUD: counter with tick buttons next to the particle stream.

    The buttons are plain form posts so the widget works without scripts.
    """
    return h("div", {"class": "widget", "id": "hud-widget"},
        h("div", {"class": "hud-controls"},
            h("div", {"class": "hud-counter-label"}, "Signal Demo // Counter"),
            h("div", {"class": "hud-counter-value", "id": "hud-count"}, count),
            h("form", {"method": "post", "action": "/hud/tick"},
                h("button", {"class": "btn primary", "name": "delta", "value": "1"}, "+ TICK"),
                h("button", {"class": "btn ghost", "name": "delta", "value": "-1"}, "- TICK")
            )
        ),
        h("img", {"class": "hud-canvas", "src": "/hud/stream", "alt": "Particle field",
                  "height": "200"})
    )


def hero(count: int = 0, fps_label: str = FPS_PLACEHOLDER) -> Element:
    return h("section", {"class": "hero", "id": "hero"},
        h("div", {"class": "hero-grid"},
            h("div", None,
                h("div", {"class": "tagline"}, "Sketchpad → TX-2 → Web"),
                h("h1", None, "WEB ARCHITECTURE, CORRECTED."),
                h("p", None, "In 1963, Ivan Sutherland drew on a phosphor display with the TX-2 "
                             "light pen and built the first interactive ECS. TX-2 brings that "
                             "architecture to the modern web: isomorphic logic, zero bloat, "
                             "precise control."),
                h("div", {"class": "cta-row"},
                    h("a", {"href": "/docs", "class": "btn primary"}, "Get Started"),
                    h("a", {"href": NPM_URL, "class": "btn ghost"}, "npm install tx2-ecs"),
                    h("a", {"href": GITHUB_URL, "class": "btn ghost"}, "View Source")
                )
            ),
            hud_panel("LIVE SYSTEM // ECS",
                h("div", {"class": "grid-two"},
                    h("div", {"class": "stat"},
                        h("span", {"class": "label"}, "RENDER"),
                        h("span", {"class": "value", "id": "hud-hydration"}, "Server")
                    ),
                    h("div", {"class": "stat"},
                        h("span", {"class": "label"}, "TICK / FPS"),
                        h("span", {"class": "value", "id": "hud-fps"}, fps_label)
                    )
                ),
                hud_widget(count)
            )
        )
    )


def why_section() -> Element:
    return hud_panel("WHY TX-2",
        h("div", {"class": "feature-grid"},
            feature_card("Fullstack ECS", "Define components once. The same systems run on server "
                                          "and client with deterministic state and hydration."),
            feature_card("Reactive Core", "Signals, computed values, and effects without VDOM "
                                          "drift. Minimal allocations, maximal control."),
            feature_card("SSR + Sync", "Server-side rendering with hydration markers plus "
                                       "delta-compressed state synchronization."),
            feature_card("Type-Safe RPC", "Define procedures with runtime guards and TypeScript "
                                          "inference across the wire."),
            feature_card("Performance Discipline", "Query indexing, batched updates, and "
                                                   "worker-ready schedulers for heavy scenes."),
            feature_card("Zero Bloat", "ESM-first, tree-shakeable modules. No framework runtime tax.")
        ),
        id="why"
    )


def quick_start_section() -> Element:
    return h("section", {"class": "grid-two", "id": "docs"},
        hud_panel("QUICK START", h("pre", {"class": "code"}, QUICK_START_CODE)),
        hud_panel("DOCS MAP",
            h("div", {"class": "feature-grid"},
                feature_card("Getting Started", "Installation, project layout, build targets, hydration.",
                             ("Read", "/docs#docs-content")),
                feature_card("Core Concepts", "World, Entity, Component, System, Signals, Scheduling.",
                             ("Read", "/docs#docs-deepdive")),
                feature_card("Client / SSR", "Rendering, hydration markers, event wiring, streaming.",
                             ("Read", "/docs#docs-client")),
                feature_card("RPC & Sync", "Type-safe RPC, rate limits, delta compression, auth hooks.",
                             ("Read", "/docs#docs-client"))
            )
        )
    )


def docs_overview_section() -> Element:
    return hud_panel("DOCS // OVERVIEW",
        h("div", {"class": "docs-grid"},
            docs_item("Architecture",
                h("p", None, "TX-2 is an isomorphic ECS. Define components and systems once; run "
                             "them on server and client. Hydration carries state across the wire "
                             "without VDOM.")),
            docs_item("Entities & Components",
                bullet_list("Entity: ID-only container.",
                            "Component: State + reactive signals via defineReactive.",
                            "Systems: Functions over queries; phases: "
                            "init/update/fixedUpdate/lateUpdate/cleanup.")),
            docs_item("Reactivity",
                h("p", None, "Signals are first-class. Components expose signals; systems react "
                             "via effects. No VDOM diffing; direct DOM ops in render system.")),
            docs_item("Rendering",
                h("p", None, "Client: Render.create wraps a render() returning h() trees. "
                             "Server: renderDocument(world) emits HTML + hydration markers.")),
            docs_item("RPC & Sync",
                h("p", None, "RPC definitions live in server; clients call with inferred types. "
                             "State sync uses delta compression; only dirty signals move.")),
            docs_item("Deployment",
                bullet_list("Bundle: npm run build (core/client/server + types).",
                            'Node SSR: import { renderDocument } from "tx2-ecs/server".',
                            "Client: include /dist/client/index.js or bundle with your app."))
        ),
        id="docs-content"
    )


def deep_dive_section() -> Element:
    return h("section", {"class": "grid-two", "id": "docs-deepdive"},
        hud_panel("DOCS // CORE", h("pre", {"class": "code"}, CORE_CODE)),
        hud_panel("DOCS // CLIENT & SSR",
            h("div", {"class": "docs-grid", "id": "docs-client"},
                docs_item("Client Render",
                    h("p", None, "Use Render.create to bind a render function. "
                                 "h(tag, props, ...children) builds DOM nodes directly; "
                                 "no VDOM diff.")),
                docs_item("SSR",
                    h("p", None, "renderDocument(world, opts) outputs HTML with hydration data. "
                                 'Include <script type="module" src="/dist/client/index.js">.')),
                docs_item("Hydration",
                    h("p", None, "hydrateWorld(world, { root, clearMarkers }) attaches to server "
                                 "markup and restores signals.")),
                docs_item("State Sync (server-driven)",
                    h("p", None, "Track dirty signals; ship deltas. RPC hooks can push state; "
                                 "clients patch into components."))
            )
        )
    )


def examples_section() -> Element:
    return hud_panel("EXAMPLES",
        h("div", {"class": "feature-grid"},
            feature_card("Live Counter", "Reactive signal demo running inside this page. "
                                         "Watch the HUD tick.",
                         ("Open HUD", "/#hud-widget")),
            feature_card("SSR Render", "This page is rendered on the server from an element tree. "
                                       "No extra framework.",
                         ("View Render", "/#hero")),
            feature_card("Particle Field", "Neon particle field whose energy follows the "
                                           "counter signal.",
                         ("Run Demo", "/#hud-widget"))
        ),
        id="examples"
    )


def manifesto_section() -> Element:
    return hud_panel("MANIFESTO // SKETCHPAD → TX-2 → WEB",
        h("h1", None, "Objects first. Behaviour over data."),
        h("p", None, "Sketchpad ran on the TX-2 at Lincoln Laboratory. Every line on its "
                     "phosphor screen was an entity; constraints were systems that ran over "
                     "them. Sixty years later the web still renders trees of widgets that "
                     "each own a slice of state."),
        bullet_list("State lives in components, not in views.",
                    "Systems are pure functions over queries.",
                    "The server renders; the client takes over where it left off.",
                    "Nothing ships that the page does not use."),
        h("div", {"class": "cta-row"},
            h("a", {"href": "/docs", "class": "btn primary"}, "Read the Docs"),
            h("a", {"href": GITHUB_URL, "class": "btn ghost"}, "View Source")
        ),
        id="manifesto"
    )


def home(count: int = 0, fps_label: str = FPS_PLACEHOLDER) -> Element:
    return layout("/",
        hero(count, fps_label),
        why_section(),
        quick_start_section(),
        docs_overview_section(),
        deep_dive_section(),
        examples_section()
    )


def docs(count: int = 0, fps_label: str = FPS_PLACEHOLDER) -> Element:
    return layout("/docs", quick_start_section(), docs_overview_section(), deep_dive_section())


def examples(count: int = 0, fps_label: str = FPS_PLACEHOLDER) -> Element:
    return layout("/examples", examples_section(), hero(count, fps_label))


def manifesto(count: int = 0, fps_label: str = FPS_PLACEHOLDER) -> Element:
    return layout("/manifesto", manifesto_section())


PAGES: Dict[str, Callable[[int, str], Element]] = {
    "/": home,
    "/docs": docs,
    "/examples": examples,
    "/manifesto": manifesto,
}
ALLOWED_PATHS = frozenset(PAGES)

PAGE_TITLES = {
    "/": "TX-2: Web Entity Component System",
    "/docs": "TX-2 // Docs",
    "/examples": "TX-2 // Examples",
    "/manifesto": "TX-2 // Manifesto",
}


def build_page(path: str, count: int = 0, fps_label: str = FPS_PLACEHOLDER) -> Optional[Element]:
    """Returns the page tree for `path`, or None when no such page exists."""
    builder = PAGES.get(path)
    return builder(count, fps_label) if builder else None


def not_found() -> Element:
    return h("div", {"class": "layout"},
        h("main", {"style": "max-width: 760px; margin: 4rem auto; padding: 1rem;"},
            hud_panel("SYSTEM CRASH // 404",
                h("h1", {"style": "font-family: var(--font-display); margin-bottom: 0.5rem;"},
                  "Signal Lost"),
                h("p", {"style": "color: var(--color-muted); margin-bottom: 1rem;"},
                  "The requested vector doesn’t exist. Return to base and try again."),
                h("div", {"class": "cta-row"},
                    h("a", {"class": "btn primary", "href": "/"}, "Return Home"),
                    h("a", {"class": "btn ghost", "href": "/docs"}, "Docs")
                ),
                id="not-found"
            )
        )
    )
