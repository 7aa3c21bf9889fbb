"""Peak extraction — pure transform from a water-level series to PeakEvents.

Modules
───────
  sanitize    — coerce raw observations, drop invalid ones
  decluster   — local-maxima candidates, temporal declustering
  classifier  — value → Tier via ordered threshold bounds
  peaks       — compose the above into extract_peaks / PeakExtractor
"""
