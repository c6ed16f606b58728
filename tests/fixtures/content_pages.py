"""Sample content files for microtext tests.

The microtext blocks are written the way PyYAML dumps them, so a document
whose tree is unchanged renders back to exactly the same text.
"""

HOME_PAGE = """---
title: Home
layout: ../layouts/Base.astro
microtext:
  hero:
    headline: A
    subhead: Build sites faster
  features:
  - title: Fast
    desc: Loads quickly
  - title: Simple
    desc: Easy to edit
  - title: Open
    desc: No lock-in
draft: false
---
import Hero from '../components/Hero.astro'

<Hero headline={frontmatter.microtext.hero.headline} />
"""

ABOUT_PAGE = """---
# Page metadata
title: About   # shown in the tab
microtext:
  intro: We make tools.
---

## About us
"""

INDEX_PAGE = """---
title: Index
microtext:
  tagline: Welcome
---
<Index />
"""

NO_MICROTEXT_PAGE = """---
title: Plain
---
Just a body.
"""

NO_FRONTMATTER_PAGE = "# Heading\n\nBody only.\n"

SAMPLE_FILES = {
    "home.mdx": HOME_PAGE,
    "about/index.mdx": ABOUT_PAGE,
    "index.mdx": INDEX_PAGE,
}
