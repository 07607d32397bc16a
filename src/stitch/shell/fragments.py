"""Built-in markup used when the content store has no partial or stylesheet."""

FALLBACK_HEADER = (
    '<div class="wrap nav" role="navigation" aria-label="Main">'
    '<a href="/" aria-label="Home">'
    '<img src="/assets/logo.png" alt="Site logo" style="height:32px;width:auto"></a>'
    '<nav aria-label="Primary">'
    '<a href="/costs">Costs</a>'
    '<a href="/regulations">Regulations</a>'
    '<a href="/builders">Builders</a>'
    '<a href="/financing">Financing</a>'
    '<a href="/blog/">Blog</a>'
    "</nav></div>"
)

FALLBACK_FOOTER = (
    '<div class="wrap">'
    '<nav class="footer-links" aria-label="Footer">'
    '<a href="/about">About</a>'
    '<a href="/privacy">Privacy</a>'
    '<a href="/builders">Find Builders</a>'
    "</nav>"
    "<p>Freshness: Updated "
    '<time datetime="" data-global-freshness></time>. '
    'Explore: <a href="/costs">Costs</a> &rarr; <a href="/regulations">Regulations</a> '
    '&rarr; <a href="/builders">Builders</a> &rarr; <a href="/financing">Financing</a>.'
    "</p></div>"
)

# Keeps header nav items from running together when no stylesheet is found.
FALLBACK_STYLE = (
    "<style>"
    "header nav{display:flex;gap:18px;align-items:center}"
    "header nav a{display:inline-block;padding:8px 12px;border-radius:10px;"
    "text-decoration:none;color:inherit}"
    "</style>"
)
