"""
Command-line interface for road_resilience.

Commands:
    road-resilience sweep       --nodes nodes.csv --edges edges.csv --criterion time_border -o sweep.csv
    road-resilience run         --config config/example_sweep.yaml
    road-resilience metrics     --nodes nodes.csv --edges edges.csv --weights length
    road-resilience route       --nodes nodes.csv --edges edges.csv --source A --target B
    road-resilience communities --nodes nodes.csv --edges edges.csv --method louvain -o communities.csv

Graph options shared by all graph commands:
    --id-column / --source-column / --target-column   column names in the CSV tables
    --region-attr / --region                           restrict to a regional subset
"""

import click
from pathlib import Path


def graph_options(f):
    """Options for loading the road graph (and optionally subsetting it)."""
    options = [
        click.option('--nodes', '-n', 'nodes_path', required=True, type=click.Path(exists=True),
                     help='Node table (CSV)'),
        click.option('--edges', '-e', 'edges_path', required=True, type=click.Path(exists=True),
                     help='Edge table (CSV)'),
        click.option('--id-column', default='id', help='Node identifier column'),
        click.option('--source-column', default='from', help='Edge source column'),
        click.option('--target-column', default='to', help='Edge target column'),
        click.option('--region-attr', help='Node attribute to subset on (e.g. region)'),
        click.option('--region', 'regions', multiple=True,
                     help='Accepted value of --region-attr (repeatable)'),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _load_graph(nodes_path, edges_path, id_column, source_column, target_column,
                region_attr, regions):
    from ..network.construction import load_road_graph, subset_by_attribute

    if bool(region_attr) != bool(regions):
        raise click.UsageError("--region-attr and --region must be given together")

    click.echo(f"Loading {nodes_path} and {edges_path}")
    try:
        graph = load_road_graph(nodes_path, edges_path, id_column, source_column, target_column)
    except ValueError as e:
        raise click.BadParameter(str(e))
    click.echo(f"  {graph.vcount()} nodes, {graph.ecount()} edges")

    if region_attr:
        try:
            graph = subset_by_attribute(graph, region_attr, regions)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--region-attr")
        click.echo(f"  Subset {region_attr} in {list(regions)}: "
                   f"{graph.vcount()} nodes, {graph.ecount()} edges")

    return graph


@click.group()
@click.version_option()
def cli():
    """Road Resilience - Road network metrics and percolation resilience sweeps."""
    pass


# ============================================================================
# Percolation Commands
# ============================================================================

@cli.command('sweep')
@graph_options
@click.option('--criterion', '-c', required=True, help='Edge attribute compared against thresholds')
@click.option('--distance', '-d', help='Edge attribute used as distance (default: criterion)')
@click.option('--start', default=0, help='First threshold')
@click.option('--stop', type=int, help='Last threshold (default: floor of criterion maximum)')
@click.option('--step', default=1, help='Threshold spacing')
@click.option('--workers', '-w', default=1, help='Number of worker processes')
@click.option('--timeout', type=float, help='Wall-clock limit for the sweep in seconds')
@click.option('--output', '-o', 'output_file', required=True, type=click.Path(),
              help='Output CSV file')
def sweep(nodes_path, edges_path, id_column, source_column, target_column, region_attr, regions,
          criterion, distance, start, stop, step, workers, timeout, output_file):
    """Run a threshold percolation sweep."""
    from ..percolation.sweep import PercolationSweep, integer_thresholds
    from ..percolation.analysis import save_results, critical_threshold

    if step <= 0:
        raise click.BadParameter("--step must be positive")

    graph = _load_graph(nodes_path, edges_path, id_column, source_column, target_column,
                        region_attr, regions)

    try:
        percolation = PercolationSweep(graph, criterion, distance)
    except ValueError as e:
        raise click.UsageError(str(e))

    if stop is None:
        thresholds = integer_thresholds(graph, criterion, start=start, step=step)
    else:
        thresholds = list(range(start, stop + 1, step))

    if not thresholds:
        raise click.UsageError(f"No thresholds between --start {start} and the stop value")

    click.echo(f"Sweeping {criterion} over {len(thresholds)} thresholds "
               f"({thresholds[0]}..{thresholds[-1]}) with {workers} worker(s)")

    try:
        results = percolation.run(thresholds, n_workers=workers, timeout=timeout)
    except TimeoutError as e:
        click.echo(f"ERROR: {e}", err=True)
        raise SystemExit(1)

    output_file = save_results(results, output_file)
    click.echo(f"Critical threshold (largest giant component jump): {critical_threshold(results)}")
    click.echo(f"✓ Saved {len(results)} results to {output_file}")


@cli.command('run')
@click.option('--config', '-c', 'config_file', required=True, type=click.Path(exists=True),
              help='Sweep config YAML')
def run(config_file):
    """Run a sweep defined by a YAML config."""
    from ..run.manifest import SweepConfig
    from ..run.orchestrator import run_from_config

    try:
        config = SweepConfig.from_yaml(config_file)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--config')

    click.echo(f"Run: {config.name}")
    try:
        results = run_from_config(config, verbose=True)
    except TimeoutError as e:
        click.echo(f"ERROR: {e}", err=True)
        raise SystemExit(1)

    if config.results_csv is None:
        from ..percolation.analysis import results_to_frame
        click.echo(results_to_frame(results).to_string(index=False))


# ============================================================================
# Network Commands
# ============================================================================

@cli.command('metrics')
@graph_options
@click.option('--weights', '-w', help='Edge attribute used as distance')
@click.option('--top', default=10, help='Number of nodes to list by betweenness')
@click.option('--output', '-o', 'output_file', type=click.Path(),
              help='Write the full centrality table to this CSV')
def metrics(nodes_path, edges_path, id_column, source_column, target_column, region_attr, regions,
            weights, top, output_file):
    """Print network summary and most central nodes."""
    from ..network.metrics import network_summary, centrality_table

    graph = _load_graph(nodes_path, edges_path, id_column, source_column, target_column,
                        region_attr, regions)

    summary = network_summary(graph, weights=weights)
    click.echo("\nNetwork summary:")
    for key, value in summary.items():
        click.echo(f"  {key}: {value}")

    table = centrality_table(graph, weights=weights)
    click.echo(f"\nTop {top} nodes by betweenness:")
    click.echo(table.nlargest(top, 'betweenness').to_string(index=False))

    if output_file:
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(output_file, index=False)
        click.echo(f"\nSaved centrality table to {output_file}")


@cli.command('route')
@graph_options
@click.option('--source', '-s', required=True, help='Source node identifier')
@click.option('--target', '-t', required=True, help='Target node identifier')
@click.option('--weights', '-w', help='Edge attribute used as distance')
def route(nodes_path, edges_path, id_column, source_column, target_column, region_attr, regions,
          source, target, weights):
    """Print the shortest route between two nodes."""
    from ..network.metrics import shortest_route

    graph = _load_graph(nodes_path, edges_path, id_column, source_column, target_column,
                        region_attr, regions)

    # CSV identifiers may have been read as integers
    names = set(graph.vs['name'])
    source = next((n for n in names if str(n) == source), source)
    target = next((n for n in names if str(n) == target), target)

    try:
        path, length = shortest_route(graph, source, target, weights=weights)
    except KeyError as e:
        raise click.BadParameter(str(e))

    if not path:
        click.echo(f"No route from {source} to {target}")
        return

    click.echo(" -> ".join(str(n) for n in path))
    click.echo(f"Length: {length}")


@cli.command('communities')
@graph_options
@click.option('--method', '-m', default='louvain',
              type=click.Choice(['walktrap', 'edge_betweenness', 'louvain']),
              help='Community detection method')
@click.option('--weights', '-w', help='Edge attribute used as weight')
@click.option('--steps', default=4, help='Random walk length (walktrap)')
@click.option('--resolution', '-r', default=1.0, help='Resolution parameter (louvain)')
@click.option('--output', '-o', 'output_file', required=True, type=click.Path(),
              help='Output CSV with node community assignments')
def communities(nodes_path, edges_path, id_column, source_column, target_column, region_attr,
                regions, method, weights, steps, resolution, output_file):
    """Detect communities and save node assignments."""
    from ..network.communities import detect_communities, community_sizes, save_membership

    graph = _load_graph(nodes_path, edges_path, id_column, source_column, target_column,
                        region_attr, regions)

    params = {}
    if method == 'walktrap':
        params['steps'] = steps
    elif method == 'louvain':
        params['resolution'] = resolution

    click.echo(f"Running {method} with {params or 'default parameters'}")
    detector = detect_communities(graph, method=method, weights=weights, **params)

    sizes = community_sizes(detector.membership)
    click.echo(f"Found {len(sizes)} communities (modularity={detector.modularity:.4f})")

    output_file = save_membership(graph, detector.membership, output_file)
    click.echo(f"✓ Saved assignments to {output_file}")
