"""Terminal building blocks: styles, help and scope overlays, and the stash panel."""