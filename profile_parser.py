#!/usr/bin/env python3
"""Profile safetag to find performance bottlenecks."""

import cProfile
import io
import pstats

from safetag import filter_html

# Sample markup mixing safe tags, unsafe tags, comments and stray '<'
html = """
<p>Paragraph with <b>bold</b>, <em>emphasis</em> and <a href="http://example.com" title="t">a link</a>.</p>
<div class="note">Unsafe container</div>
<img src="https://example.com/x.png" width=10 height=20 alt="x" />
<script>alert(1)</script>
<!-- a comment -->
1 < 2 and 3 > 2
<a href="javascript:alert(1)">bad link</a>
""" * 200  # Repeat for more meaningful results

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    result = filter_html(html)

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(30)  # Top 30 functions
print(s.getvalue())
