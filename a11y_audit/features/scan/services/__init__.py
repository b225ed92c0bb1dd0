"""
Scan Services

Organized by responsibility:

1. rendering/ - Browser automation and DOM capture
   - page_renderer.py: headless Chrome lifecycle, navigation deadline, snapshot capture
   - snapshot.py: read-only DOM + computed style view handed to the checks

2. checks/ - The accessibility check catalogue
   - rules.py: one pure function per check
   - color.py: WCAG luminance and contrast maths
   - registry.py: ordered registry, per-check isolation

3. scan/ - Single page scanning
   - page_scanner.py: render + checks -> PageResult
   - scoring.py: severity weighted score

4. discovery/ - Same-host link extraction for multi-page runs

5. orchestration/ - Bounded crawl over the base page and its links

6. utils/ - Aggregation of page results into a ScanResult

7. fallback/ - Primary/degraded controller and the simulated result generator
"""
